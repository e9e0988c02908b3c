from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Callable, Mapping, Sequence

from tag_timeline.config import ChartSettings
from tag_timeline.features.series import Series

PointSelectedCallback = Callable[[int], None]
TooltipResizeCallback = Callable[[int], None]

# Wide enough to hold any finite float at the configured decimals.
_DECIMAL_CONTEXT = Context(prec=400)


@dataclass(frozen=True)
class ChartData:
    series: tuple[Series, ...]
    options: dict[str, Any]
    tooltip_enabled_indexes: tuple[int, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, Any]:
        return {
            "series": [item.to_dict() for item in self.series],
            "options": strip_callbacks(self.options),
            "tooltipEnabledIndexes": list(self.tooltip_enabled_indexes),
        }


def tooltip_width(
    eligible_count: int,
    *,
    items_per_row: int = 3,
    item_width_px: int = 124,
) -> int:
    """Width in pixels for a tooltip listing ``eligible_count`` series."""
    return math.ceil(eligible_count / items_per_row) * item_width_px


def format_x_seconds(value: float, *, divisor: float = 1000.0, decimals: int = 3) -> str:
    """Render a millisecond category value as seconds.

    Halves round away from zero on the exact binary value so the output is
    identical to JavaScript's ``Number.prototype.toFixed``.
    """
    scaled = value / divisor
    if math.isnan(scaled):
        return "NaN"
    if math.isinf(scaled):
        return "Infinity" if scaled > 0 else "-Infinity"
    if scaled == 0:
        scaled = 0.0
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(scaled).quantize(
        quantum,
        rounding=ROUND_HALF_UP,
        context=_DECIMAL_CONTEXT,
    )
    return f"{rounded:.{decimals}f}"


def build_chart_options(
    categories: Sequence[int],
    tooltip_enabled_indexes: Sequence[int],
    on_point_selected: PointSelectedCallback,
    *,
    on_tooltip_resize: TooltipResizeCallback | None = None,
    settings: ChartSettings | None = None,
) -> dict[str, Any]:
    """Build ApexCharts-shaped options for the tag frequency timeline.

    ``categories`` must be the frame indexes in the same order used to build
    series data. Click events are translated into the positional index of the
    selected category. ``on_tooltip_resize`` is called after the renderer
    mounts or updates the chart with the tooltip width it should apply.
    """
    settings = settings or ChartSettings()
    enabled_indexes = list(tooltip_enabled_indexes)
    width = tooltip_width(
        len(enabled_indexes),
        items_per_row=settings.tooltip_items_per_row,
        item_width_px=settings.tooltip_item_width_px,
    )

    def _on_click(_event: Any = None, _chart_context: Any = None, config: Any = None) -> None:
        if not isinstance(config, Mapping) or config.get("dataPointIndex") is None:
            return
        on_point_selected(int(config["dataPointIndex"]))

    def _on_render(_chart: Any = None, _options: Any = None) -> None:
        if on_tooltip_resize is not None:
            on_tooltip_resize(width)

    def _format_x(value: float, _opts: Any = None) -> str:
        return format_x_seconds(
            value,
            divisor=settings.x_value_divisor,
            decimals=settings.x_value_decimals,
        )

    return {
        "chart": {
            "height": settings.height,
            "type": settings.chart_type,
            "toolbar": {"show": False},
            "animations": {"enabled": False},
            "sparkline": {"enabled": True},
            "events": {
                "click": _on_click,
                "mounted": _on_render,
                "updated": _on_render,
            },
        },
        "dataLabels": {"enabled": False},
        "stroke": {"curve": settings.stroke_curve},
        "xaxis": {
            "type": "numeric",
            "categories": [int(category) for category in categories],
        },
        "tooltip": {
            "theme": settings.theme,
            "x": {"formatter": _format_x},
            "enabledOnSeries": enabled_indexes,
        },
        "legend": {"show": False},
    }


def strip_callbacks(options: Any) -> Any:
    """Deep copy of ``options`` without callables, safe for JSON export."""
    if isinstance(options, Mapping):
        return {
            key: strip_callbacks(value)
            for key, value in options.items()
            if not callable(value)
        }
    if isinstance(options, (list, tuple)):
        return [strip_callbacks(value) for value in options if not callable(value)]
    return options
