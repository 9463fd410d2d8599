"""Shared row-loading helpers for spreadsheet tab exports."""

import csv
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

Rows = list[list[str]]


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value)


def normalize_rows(rows: Iterable[Sequence[object] | None]) -> Rows:
    """Pad ragged rows to a rectangle and turn missing cells into empty strings."""
    materialized = [[_cell_text(cell) for cell in (row or [])] for row in rows]
    width = max((len(row) for row in materialized), default=0)
    return [row + [""] * (width - len(row)) for row in materialized]


def is_blank(row: Sequence[str]) -> bool:
    """Return whether every cell in a row is empty or whitespace."""
    return all(not str(cell).strip() for cell in row)


def _field_count(path: Path) -> int:
    with path.open(newline="", encoding="utf-8") as stream:
        return max((len(row) for row in csv.reader(stream)), default=0)


def load_tab_rows(path: Path | str) -> Rows:
    """Load one CSV tab export as rows of strings, keeping blank rows in place.

    Spreadsheet exports are often ragged, so the column count is taken from the
    widest row rather than the first one.
    """
    path = Path(path).expanduser()
    if not (width := _field_count(path)):
        return []
    df = pd.read_csv(
        path,
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
    )
    return normalize_rows(df.fillna("").values.tolist())
