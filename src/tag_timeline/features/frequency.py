from __future__ import annotations

from collections import Counter
from typing import Sequence

import pandas as pd

from tag_timeline.io.schema import AnnotationData, Frame, TagName, TagUniverse

DETECTION_COLUMNS = ["frame_index", "position", "confidence", "tag_id", "tag_name"]


def filter_frames(frames: Sequence[Frame], confidence: float) -> list[Frame]:
    """Keep detections whose confidence meets the threshold (inclusive)."""
    return [frame for frame in frames if frame.confidence >= confidence]


def count_tag_occurrences(
    frames: Sequence[Frame],
    tag_universe: TagUniverse,
) -> dict[TagName, int]:
    """Count detections per tag at one frame index.

    Every tag in ``tag_universe`` gets an entry, in universe order. Repeated
    detections of a tag accumulate; tags outside the universe are ignored.
    """
    observed = Counter(frame.tag.name for frame in frames)
    return {name: int(observed.get(name, 0)) for name in tag_universe}


def build_tag_frequency_table(
    annotation_data: AnnotationData,
    tag_universe: TagUniverse,
    confidence: float,
) -> pd.DataFrame:
    """Per-frame-index tag counts, one column per known tag.

    Rows follow the iteration order of ``annotation_data.frames``; the index is
    not re-sorted, so callers are responsible for supplying ascending keys.
    """
    tag_names = list(tag_universe)
    rows: list[list[int]] = []
    for frames in annotation_data.frames.values():
        counts = count_tag_occurrences(filter_frames(frames, confidence), tag_universe)
        rows.append([counts[name] for name in tag_names])
    return pd.DataFrame(
        rows,
        index=pd.Index(annotation_data.frame_indexes, name="frame_index", dtype="int64"),
        columns=pd.Index(tag_names, name="tag"),
        dtype="int64",
    )


def build_detection_table(annotation_data: AnnotationData) -> pd.DataFrame:
    """Flatten annotation data into one row per detection."""
    records = [
        {
            "frame_index": frame_index,
            "position": position,
            "confidence": frame.confidence,
            "tag_id": frame.tag.id,
            "tag_name": frame.tag.name,
        }
        for frame_index, frames in annotation_data.frames.items()
        for position, frame in enumerate(frames)
    ]
    table = pd.DataFrame.from_records(records, columns=DETECTION_COLUMNS)
    table["tag_id"] = pd.array(table["tag_id"], dtype="Int64")
    return table


def summarize_detections(
    detections: pd.DataFrame,
    tag_universe: TagUniverse,
    confidence: float,
) -> dict[str, int]:
    passing = detections["confidence"] >= confidence
    known = detections["tag_name"].isin(list(tag_universe))
    return {
        "detections_total": int(len(detections)),
        "detections_passing_confidence": int(passing.sum()),
        "detections_counted": int((passing & known).sum()),
        "detections_unknown_tag": int((passing & ~known).sum()),
    }
