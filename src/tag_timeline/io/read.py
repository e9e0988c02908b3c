from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from tag_timeline.io.schema import (
    AnnotationData,
    TagName,
    parse_annotation_data,
    parse_tag_universe,
)

LOGGER = logging.getLogger(__name__)


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    # json.loads keeps the last value for repeated keys; a repeated frame
    # index would otherwise disappear without notice.
    data: dict[str, Any] = {}
    for key, value in pairs:
        if key in data:
            raise ValueError(f"duplicate key in JSON object: {key!r}")
        data[key] = value
    return data


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle, object_pairs_hook=_reject_duplicate_keys)


def load_annotation_data(path: Path) -> AnnotationData:
    """Load per-frame detections exported by the annotation store."""
    if path.suffix != ".json":
        raise ValueError(f"Unsupported annotation file type: {path.suffix}")
    annotation_data = parse_annotation_data(_read_json(path))
    LOGGER.info(
        "Loaded %d frame indexes (%d detections) from %s",
        len(annotation_data.frames),
        sum(len(frames) for frames in annotation_data.frames.values()),
        path,
    )
    return annotation_data


def load_tag_universe(path: Path) -> dict[TagName, int]:
    if path.suffix == ".json":
        raw = _read_json(path)
    elif path.suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    else:
        raise ValueError(f"Unsupported tag file type: {path.suffix}")
    tag_universe = parse_tag_universe(raw)
    LOGGER.info("Loaded %d tags from %s", len(tag_universe), path)
    return tag_universe
