from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field


class ChartSettings(BaseModel):
    height: int = Field(default=350, ge=1)
    chart_type: str = "area"
    theme: Literal["dark", "light"] = "dark"
    stroke_curve: Literal["smooth", "straight", "stepline"] = "smooth"
    tooltip_items_per_row: int = Field(default=3, ge=1)
    tooltip_item_width_px: int = Field(default=124, ge=1)
    # Category values arrive in milliseconds; the tooltip shows seconds.
    x_value_divisor: float = Field(default=1000.0, gt=0.0)
    x_value_decimals: int = Field(default=3, ge=0, le=10)


class FilteringConfig(BaseModel):
    default_confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class PresentationConfig(BaseModel):
    supported_asset_types: list[str] = Field(default_factory=lambda: ["video"])
    no_asset_message: str = "Select an asset to view its annotation timeline."
    unsupported_asset_message: str = "Annotation timelines are only available for video assets."
    no_annotations_message: str = "No annotations are available for this asset."
    no_tags_message: str = "No tags are registered for the selected model."


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    chart: ChartSettings = Field(default_factory=ChartSettings)
    filtering: FilteringConfig = Field(default_factory=FilteringConfig)
    presentation: PresentationConfig = Field(default_factory=PresentationConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
CONFIDENCE_ENV = "TAG_TIMELINE_CONFIDENCE"


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)

    env_confidence = os.getenv(CONFIDENCE_ENV)
    if env_confidence:
        config.filtering = FilteringConfig.model_validate(
            {"default_confidence": float(env_confidence)}
        )
    return config
