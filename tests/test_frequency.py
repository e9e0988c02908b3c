from __future__ import annotations

import pandas as pd
import pytest

from tag_timeline.features.frequency import (
    build_detection_table,
    build_tag_frequency_table,
    count_tag_occurrences,
    filter_frames,
    summarize_detections,
)
from tag_timeline.io.schema import AnnotationData, Frame, Tag

TAGS = {"cat": 1, "dog": 2}


def _frame(name: str, confidence: float, tag_id: int | None = None) -> Frame:
    return Frame(confidence=confidence, tag=Tag(name=name, id=tag_id))


def _annotations(frames: dict[int, list[Frame]]) -> AnnotationData:
    return AnnotationData(
        fps=25.0,
        frames={index: tuple(entries) for index, entries in frames.items()},
    )


def _example_annotations() -> AnnotationData:
    return _annotations(
        {
            0: [_frame("cat", 0.9)],
            1: [_frame("dog", 0.4), _frame("cat", 0.9)],
        }
    )


def test_filter_frames_uses_inclusive_threshold_and_keeps_order() -> None:
    frames = [_frame("dog", 0.5), _frame("cat", 0.49), _frame("cat", 0.75)]

    kept = filter_frames(frames, 0.5)

    assert kept == [frames[0], frames[2]]
    assert len(frames) == 3


def test_count_tag_occurrences_pads_zeros_and_accumulates_duplicates() -> None:
    frames = [_frame("dog", 0.9), _frame("dog", 0.8), _frame("bird", 0.99)]

    counts = count_tag_occurrences(frames, TAGS)

    assert counts == {"cat": 0, "dog": 2}
    assert list(counts) == ["cat", "dog"]


def test_build_tag_frequency_table_matches_worked_example() -> None:
    table = build_tag_frequency_table(_example_annotations(), TAGS, confidence=0.5)

    assert list(table.index) == [0, 1]
    assert list(table.columns) == ["cat", "dog"]
    assert table["cat"].tolist() == [1, 1]
    assert table["dog"].tolist() == [0, 0]
    assert all(dtype == "int64" for dtype in table.dtypes)


def test_build_tag_frequency_table_all_zero_above_every_confidence() -> None:
    table = build_tag_frequency_table(_example_annotations(), TAGS, confidence=0.95)

    assert int(table.to_numpy().sum()) == 0
    assert table.shape == (2, 2)


def test_unknown_tags_never_become_columns() -> None:
    annotations = _annotations(
        {
            0: [_frame("bird", 0.9), _frame("cat", 0.9)],
            5: [_frame("bird", 0.99)],
        }
    )

    table = build_tag_frequency_table(annotations, TAGS, confidence=0.5)

    assert list(table.columns) == ["cat", "dog"]
    assert table.loc[0].tolist() == [1, 0]
    assert table.loc[5].tolist() == [0, 0]


def test_row_sums_equal_passing_known_detections() -> None:
    annotations = _annotations(
        {
            2: [_frame("cat", 0.6), _frame("cat", 0.7), _frame("dog", 0.2)],
            4: [],
            9: [_frame("dog", 0.5), _frame("bird", 0.8), _frame("cat", 0.51)],
        }
    )
    threshold = 0.5

    table = build_tag_frequency_table(annotations, TAGS, confidence=threshold)

    for frame_index, frames in annotations.frames.items():
        expected = sum(
            1 for frame in frames if frame.confidence >= threshold and frame.tag.name in TAGS
        )
        assert int(table.loc[frame_index].sum()) == expected


@pytest.mark.parametrize(("low", "high"), [(0.0, 0.5), (0.3, 0.7), (0.5, 0.5), (0.6, 1.0)])
def test_counts_are_monotonic_in_confidence(low: float, high: float) -> None:
    annotations = _annotations(
        {
            0: [_frame("cat", 0.1), _frame("cat", 0.6), _frame("dog", 0.7)],
            1: [_frame("dog", 0.3), _frame("dog", 0.95), _frame("cat", 1.0)],
            3: [_frame("cat", 0.5)],
        }
    )

    low_table = build_tag_frequency_table(annotations, TAGS, confidence=low)
    high_table = build_tag_frequency_table(annotations, TAGS, confidence=high)

    assert (high_table <= low_table).all().all()


def test_frame_index_order_is_preserved_not_sorted() -> None:
    annotations = _annotations({10: [_frame("cat", 0.9)], 3: [], 7: [_frame("dog", 0.9)]})

    table = build_tag_frequency_table(annotations, TAGS, confidence=0.5)

    assert list(table.index) == [10, 3, 7]


def test_frequency_table_for_empty_inputs_keeps_shape() -> None:
    empty_frames = build_tag_frequency_table(_annotations({}), TAGS, confidence=0.5)
    no_tags = build_tag_frequency_table(_example_annotations(), {}, confidence=0.5)

    assert empty_frames.shape == (0, 2)
    assert list(empty_frames.columns) == ["cat", "dog"]
    assert no_tags.shape == (2, 0)


def test_detection_table_and_summary_report_unknown_tags() -> None:
    annotations = _annotations(
        {
            0: [_frame("cat", 0.9, tag_id=1), _frame("bird", 0.9)],
            1: [_frame("dog", 0.4, tag_id=2)],
        }
    )

    detections = build_detection_table(annotations)
    summary = summarize_detections(detections, TAGS, confidence=0.5)

    assert list(detections["frame_index"]) == [0, 0, 1]
    assert list(detections["position"]) == [0, 1, 0]
    assert detections["tag_id"].isna().tolist() == [False, True, False]
    assert summary == {
        "detections_total": 3,
        "detections_passing_confidence": 2,
        "detections_counted": 1,
        "detections_unknown_tag": 1,
    }


def test_detection_table_for_empty_annotations() -> None:
    detections = build_detection_table(_annotations({}))

    assert detections.empty
    assert list(detections.columns) == [
        "frame_index",
        "position",
        "confidence",
        "tag_id",
        "tag_name",
    ]
    assert isinstance(detections, pd.DataFrame)
