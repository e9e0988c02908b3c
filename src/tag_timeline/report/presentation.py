from __future__ import annotations

import logging
from dataclasses import dataclass

from tag_timeline.config import AppConfig
from tag_timeline.io.schema import AnnotationData, TagUniverse
from tag_timeline.pipeline.chart_data import build_chart_data
from tag_timeline.report.chart import ChartData, PointSelectedCallback, TooltipResizeCallback

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Asset:
    asset_id: str
    asset_type: str


@dataclass(frozen=True)
class ChartView:
    """Either a chart to render or the placeholder text to show instead."""

    chart: ChartData | None = None
    message: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.chart is None


def build_chart_view(
    asset: Asset | None,
    annotation_data: AnnotationData | None,
    tag_universe: TagUniverse | None,
    confidence: float,
    on_point_selected: PointSelectedCallback | None = None,
    *,
    on_tooltip_resize: TooltipResizeCallback | None = None,
    config: AppConfig | None = None,
) -> ChartView:
    config = config or AppConfig()
    presentation = config.presentation

    if asset is None:
        return ChartView(message=presentation.no_asset_message)
    supported = {asset_type.lower() for asset_type in presentation.supported_asset_types}
    if asset.asset_type.lower() not in supported:
        LOGGER.debug("Asset %s has unsupported type %s", asset.asset_id, asset.asset_type)
        return ChartView(message=presentation.unsupported_asset_message)
    if not tag_universe:
        return ChartView(message=presentation.no_tags_message)

    chart = build_chart_data(
        annotation_data=annotation_data,
        tag_universe=tag_universe,
        confidence=confidence,
        on_point_selected=on_point_selected,
        on_tooltip_resize=on_tooltip_resize,
        settings=config.chart,
    )
    if chart is None:
        return ChartView(message=presentation.no_annotations_message)
    return ChartView(chart=chart)
