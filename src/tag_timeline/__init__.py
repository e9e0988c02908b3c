from importlib.metadata import PackageNotFoundError, version

from tag_timeline.features.series import Series
from tag_timeline.io.schema import AnnotationData, Frame, Tag
from tag_timeline.pipeline.chart_data import build_chart_data
from tag_timeline.report.chart import ChartData

try:
    __version__ = version("tag-timeline")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "AnnotationData",
    "ChartData",
    "Frame",
    "Series",
    "Tag",
    "__version__",
    "build_chart_data",
]
