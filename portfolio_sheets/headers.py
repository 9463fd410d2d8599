"""Keyword-driven header row detection and field-to-column resolution."""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

ABSENT = -1
HEADER_SCAN_LIMIT = 15


def normalize_header(text: object) -> str:
    """Lower-case header text and drop every non-alphanumeric character."""
    return re.sub(r"[^a-z0-9]", "", str(text or "").lower())


def _resolve_in_normalized(normalized_headers: Sequence[str], hints: Sequence[str]) -> int:
    for hint in hints:
        key = normalize_header(hint)
        if not key:
            continue
        if key in normalized_headers:
            return normalized_headers.index(key)
        for index, header in enumerate(normalized_headers):
            if key in header:
                return index
    return ABSENT


def resolve_column_index(headers: Sequence[str], hints: Sequence[str]) -> int:
    """Resolve one field by exact normalized match per hint, then substring match."""
    return _resolve_in_normalized([normalize_header(h) for h in headers], hints)


@dataclass(frozen=True)
class ColumnMap:
    """Resolved field-to-column index map for one sheet."""

    indices: Mapping[str, int]

    @classmethod
    def resolve(
        cls,
        headers: Sequence[str],
        field_hints: Mapping[str, Sequence[str]],
    ) -> "ColumnMap":
        """Resolve every field of a hint table against one header row."""
        normalized = [normalize_header(h) for h in headers]
        indices = {
            name: _resolve_in_normalized(normalized, hints) for name, hints in field_hints.items()
        }
        return cls(MappingProxyType(indices))

    def index(self, field_name: str) -> int:
        """Return resolved column index, ABSENT when the field did not resolve."""
        return self.indices.get(field_name, ABSENT)

    def has(self, field_name: str) -> bool:
        """Return whether the field resolved to a column."""
        return self.index(field_name) != ABSENT

    def cell(self, values: Sequence[str], field_name: str, default: str = "") -> str:
        """Return stripped cell text for a field, or default when absent or empty."""
        index = self.index(field_name)
        if index == ABSENT or index >= len(values):
            return default
        return str(values[index] or "").strip() or default


def _is_candidate(cells: Sequence[str]) -> bool:
    return sum(1 for cell in cells if cell) >= 2


def _mentions_keyword(cells: Sequence[str], keywords: Sequence[str]) -> bool:
    # A substring hit covers exact tokens as well as plurals such as "Balances".
    return any(keyword in cell for keyword in keywords for cell in cells)


def find_header_row(
    rows: Sequence[Sequence[str]],
    keywords: Sequence[str],
    scan_limit: int = HEADER_SCAN_LIMIT,
) -> int:
    """Return the first leading row naming a keyword, else the first non-empty row.

    Rows are judged top-down, one at a time, so a data row further down can never
    win over an earlier header whose labels only contain the keywords.
    """
    for index, row in enumerate(rows[:scan_limit]):
        cells = [str(cell or "").strip().lower() for cell in row]
        if _is_candidate(cells) and _mentions_keyword(cells, keywords):
            return index
    for index, row in enumerate(rows):
        if any(str(cell or "").strip() for cell in row):
            return index
    return ABSENT
