from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    # The frame index is the row label of frequency tables, so it is kept.
    if fmt == "parquet":
        df.to_parquet(path, index=True)
        return path
    if fmt == "csv":
        df.to_csv(path, index=True)
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def write_json(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=False), encoding="utf-8")
    return path
