from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

TagName = str
TagUniverse = Mapping[TagName, int]


@dataclass(frozen=True)
class Tag:
    name: TagName
    id: int | None = None


@dataclass(frozen=True)
class Frame:
    """One detected object instance at a frame index.

    Geometry and tracking fields present upstream are dropped while parsing;
    only the confidence and tag take part in aggregation.
    """

    confidence: float
    tag: Tag


@dataclass(frozen=True)
class AnnotationData:
    fps: float
    frames: Mapping[int, tuple[Frame, ...]]

    @property
    def frame_indexes(self) -> list[int]:
        return list(self.frames.keys())

    def is_empty(self) -> bool:
        return not self.frames


def validate_frame_order(frame_indexes: Iterable[int]) -> None:
    """Raise when frame indexes are not strictly ascending.

    Series data is aligned positionally with the frame index order, so an
    out-of-order or repeated key would silently shift every count.
    """
    previous: int | None = None
    for frame_index in frame_indexes:
        if previous is not None and frame_index <= previous:
            if frame_index == previous:
                raise ValueError(f"duplicate frame index: {frame_index}")
            raise ValueError(
                f"frame indexes must be ascending, got {frame_index} after {previous}"
            )
        previous = frame_index


def _parse_frame_index(raw_key: Any) -> int:
    if isinstance(raw_key, bool):
        raise ValueError(f"frame index must be an integer, got {raw_key!r}")
    if isinstance(raw_key, int):
        return raw_key
    if isinstance(raw_key, str):
        try:
            return int(raw_key.strip(), 10)
        except ValueError as exc:
            raise ValueError(f"frame index must be an integer, got {raw_key!r}") from exc
    raise ValueError(f"frame index must be an integer, got {raw_key!r}")


def _parse_confidence(raw_value: Any, *, frame_index: int) -> float:
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
        raise ValueError(f"frame {frame_index}: confidence must be a number, got {raw_value!r}")
    value = float(raw_value)
    if not math.isfinite(value) or value < 0.0 or value > 1.0:
        raise ValueError(f"frame {frame_index}: confidence must be in [0, 1], got {value!r}")
    return value


def _parse_tag(raw_tag: Any, *, frame_index: int) -> Tag:
    if not isinstance(raw_tag, Mapping):
        raise ValueError(f"frame {frame_index}: tag must be an object with a name")
    name = raw_tag.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"frame {frame_index}: tag name must be a non-empty string")
    raw_id = raw_tag.get("id")
    tag_id = None if raw_id is None else int(raw_id)
    return Tag(name=name, id=tag_id)


def parse_frame(raw_frame: Any, *, frame_index: int) -> Frame:
    if not isinstance(raw_frame, Mapping):
        raise ValueError(f"frame {frame_index}: each detection must be an object")
    return Frame(
        confidence=_parse_confidence(raw_frame.get("confidence"), frame_index=frame_index),
        tag=_parse_tag(raw_frame.get("tag"), frame_index=frame_index),
    )


def parse_annotation_data(raw: Mapping[str, Any]) -> AnnotationData:
    if not isinstance(raw, Mapping):
        raise ValueError("annotation data must be an object with 'fps' and 'frames'")

    raw_fps = raw.get("fps", 0.0)
    if isinstance(raw_fps, bool) or not isinstance(raw_fps, (int, float)):
        raise ValueError(f"annotation field 'fps' must be a number, got {raw_fps!r}")

    raw_frames = raw.get("frames")
    if raw_frames is None:
        raw_frames = {}
    if not isinstance(raw_frames, Mapping):
        raise ValueError("annotation field 'frames' must map frame indexes to detections")

    frames: dict[int, tuple[Frame, ...]] = {}
    for raw_key, raw_detections in raw_frames.items():
        frame_index = _parse_frame_index(raw_key)
        if raw_detections is None:
            raw_detections = []
        if not isinstance(raw_detections, list):
            raise ValueError(f"frame {frame_index}: detections must be a list")
        if frame_index in frames:
            raise ValueError(f"duplicate frame index: {frame_index}")
        frames[frame_index] = tuple(
            parse_frame(raw_frame, frame_index=frame_index) for raw_frame in raw_detections
        )

    validate_frame_order(frames.keys())
    return AnnotationData(fps=float(raw_fps), frames=frames)


def parse_tag_universe(raw: Any) -> dict[TagName, int]:
    """Normalize a tag registry into an ordered ``name -> id`` mapping.

    Accepts either a mapping of names to ids or a list of ``{id, name}``
    objects. Enumeration order is preserved because it breaks ties when
    series are ranked.
    """
    if isinstance(raw, Mapping):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = []
        for item in raw:
            if not isinstance(item, Mapping) or "name" not in item or "id" not in item:
                raise ValueError("tag list entries must be objects with 'id' and 'name'")
            pairs.append((item["name"], item["id"]))
    else:
        raise ValueError("tag universe must be a mapping of tag name to id or a list of tags")

    universe: dict[TagName, int] = {}
    for name, tag_id in pairs:
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"tag name must be a non-empty string, got {name!r}")
        if isinstance(tag_id, bool) or not isinstance(tag_id, (int, float)):
            raise ValueError(f"tag '{name}' must have a numeric id, got {tag_id!r}")
        if name in universe:
            raise ValueError(f"duplicate tag name: {name}")
        universe[name] = int(tag_id)
    return universe
