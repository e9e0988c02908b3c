from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import pandas as pd

from tag_timeline.io.schema import TagName


@dataclass(frozen=True)
class Series:
    name: TagName
    data: tuple[int, ...]

    @property
    def total(self) -> int:
        return sum(self.data)

    def has_occurrences(self) -> bool:
        return any(value != 0 for value in self.data)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "data": list(self.data)}


def rank_tags(frequency_table: pd.DataFrame) -> pd.DataFrame:
    """Order tags by total occurrences, ties broken by column position."""
    ranking = pd.DataFrame(
        {
            "tag": list(frequency_table.columns),
            "total": frequency_table.sum(axis=0).astype("int64").to_numpy(),
            "universe_position": range(len(frequency_table.columns)),
        }
    )
    return ranking.sort_values(
        ["total", "universe_position"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)


def sort_series(frequency_table: pd.DataFrame) -> list[Series]:
    ranking = rank_tags(frequency_table)
    return [
        Series(
            name=str(tag),
            data=tuple(int(value) for value in frequency_table[tag].tolist()),
        )
        for tag in ranking["tag"]
    ]


def tooltip_enabled_indexes(series: Sequence[Series]) -> list[int]:
    """Indexes of series with at least one non-zero count.

    Series that are zero at every frame index stay plotted but are left out
    of the hover tooltip.
    """
    return [index for index, item in enumerate(series) if item.has_occurrences()]
