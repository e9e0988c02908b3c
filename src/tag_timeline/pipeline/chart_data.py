from __future__ import annotations

import logging

from tag_timeline.config import ChartSettings
from tag_timeline.features.frequency import build_tag_frequency_table
from tag_timeline.features.series import sort_series, tooltip_enabled_indexes
from tag_timeline.io.schema import AnnotationData, TagUniverse
from tag_timeline.report.chart import (
    ChartData,
    PointSelectedCallback,
    TooltipResizeCallback,
    build_chart_options,
)

LOGGER = logging.getLogger(__name__)


def _noop_point_selected(_index: int) -> None:
    return None


def build_chart_data(
    annotation_data: AnnotationData | None,
    tag_universe: TagUniverse | None,
    confidence: float,
    on_point_selected: PointSelectedCallback | None = None,
    *,
    on_tooltip_resize: TooltipResizeCallback | None = None,
    settings: ChartSettings | None = None,
) -> ChartData | None:
    """Aggregate annotations into sorted tag series and chart options.

    Returns ``None`` when there is nothing to chart, so callers can show an
    empty state. ``confidence`` is expected in ``[0, 1]`` and is not
    validated here.
    """
    if annotation_data is None or annotation_data.is_empty():
        LOGGER.debug("No annotation data; skipping chart build")
        return None
    if not tag_universe:
        LOGGER.debug("Empty tag universe; skipping chart build")
        return None

    frequency_table = build_tag_frequency_table(
        annotation_data=annotation_data,
        tag_universe=tag_universe,
        confidence=confidence,
    )
    series = sort_series(frequency_table)
    enabled_indexes = tooltip_enabled_indexes(series)
    options = build_chart_options(
        categories=annotation_data.frame_indexes,
        tooltip_enabled_indexes=enabled_indexes,
        on_point_selected=on_point_selected or _noop_point_selected,
        on_tooltip_resize=on_tooltip_resize,
        settings=settings,
    )
    LOGGER.debug(
        "Built chart data: %d frame indexes, %d series, %d tooltip-enabled (confidence>=%s)",
        len(frequency_table.index),
        len(series),
        len(enabled_indexes),
        confidence,
    )
    return ChartData(
        series=tuple(series),
        options=options,
        tooltip_enabled_indexes=tuple(enabled_indexes),
    )
