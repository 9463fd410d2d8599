"""Header-aligned row building for writing records back into spreadsheet tabs."""

from collections.abc import Sequence
from dataclasses import dataclass

from portfolio_sheets.config import Asset, BankAccount, Subscription, Trade
from portfolio_sheets.headers import ABSENT, normalize_header
from portfolio_sheets.tables import DEFAULT_TABLES, LookupTables

CellValue = str | float | int | None

_RECORD_DATA_TYPES: dict[type, str] = {
    Trade: "trades",
    Asset: "assets",
    Subscription: "subscriptions",
    BankAccount: "accounts",
}


def _find_unclaimed(
    normalized_headers: Sequence[str],
    row: Sequence[CellValue],
    hints: Sequence[str],
) -> int:
    keys = [key for key in (normalize_header(hint) for hint in hints) if key]
    for index, header in enumerate(normalized_headers):
        if row[index] is None and header in keys:
            return index
    for index, header in enumerate(normalized_headers):
        if row[index] is None and any(key in header for key in keys):
            return index
    return ABSENT


@dataclass(frozen=True, slots=True)
class ClaimList:
    """Ordered field -> hints table; earlier fields claim contested columns first."""

    claims: tuple[tuple[str, tuple[str, ...]], ...]

    @property
    def fields(self) -> tuple[str, ...]:
        """Return field names in claim priority order."""
        return tuple(name for name, _ in self.claims)

    def build_row(self, headers: Sequence[str], values: dict[str, CellValue]) -> list[CellValue]:
        """Place each field value under the first unclaimed matching header."""
        normalized = [normalize_header(header) for header in headers]
        row: list[CellValue] = [None] * len(headers)
        for name, hints in self.claims:
            if name not in values or values[name] is None:
                continue
            if (index := _find_unclaimed(normalized, row, hints)) != ABSENT:
                row[index] = values[name]
        return row


def pick_header_row(rows: Sequence[Sequence[str]]) -> list[str]:
    """Return the row with most non-empty cells, the earliest one on ties."""
    best: list[str] = []
    best_count = 0
    for row in rows:
        count = sum(1 for cell in row if str(cell or "").strip())
        if count > best_count:
            best, best_count = [str(cell or "") for cell in row], count
    return best


def _cell_value(value: object) -> CellValue:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if value is None or isinstance(value, (str, int, float)):
        return value
    return str(value)


def record_to_row(
    record: Trade | Asset | Subscription | BankAccount,
    headers: Sequence[str],
    tables: LookupTables = DEFAULT_TABLES,
) -> list[CellValue]:
    """Map a writable record onto cells aligned with an existing header row."""
    if (data_type := _RECORD_DATA_TYPES.get(type(record))) is None:
        raise ValueError(f"Unsupported record type: {type(record).__name__}")
    claim_list = ClaimList(tables.row_claims[data_type])
    values = {name: _cell_value(getattr(record, name)) for name in claim_list.fields}
    return claim_list.build_row(headers, values)
