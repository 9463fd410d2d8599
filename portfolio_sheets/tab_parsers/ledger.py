"""Monthly budget grid parsers for detailed expense and income tabs."""

import re
from collections.abc import Sequence

from portfolio_sheets.coercers import is_safe_key, parse_number
from portfolio_sheets.config import LedgerCategory, LedgerData, LedgerItem, SyncLogs
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import TabParser
from portfolio_sheets.tables import DEFAULT_TABLES, LookupTables
from portfolio_sheets.utils import Rows, normalize_rows

MONTH_COLUMNS = range(1, 13)
EXPENSE_HEADER_SCAN_LIMIT = 50
INCOME_HEADER_SCAN_LIMIT = 10
EXPENSE_TITLE_MARKER = "expense categorie"
INCOME_CATEGORY_NAME = "Income Sources"
_ACTIVE_YEAR = re.compile(r"-(\d{2,4})$")


def _cell(row: Sequence[str], column: int) -> str:
    return row[column].strip() if column < len(row) else ""


def _month_cell_count(row: Sequence[str], month_names: Sequence[str]) -> int:
    count = 0
    for column in MONTH_COLUMNS:
        value = _cell(row, column).lower()
        if value and value.startswith(tuple(month_names)):
            count += 1
    return count


def _is_expense_title(row: Sequence[str]) -> bool:
    return EXPENSE_TITLE_MARKER in _cell(row, 0).lower()


def _find_month_header(
    grid: Rows,
    scan_limit: int,
    month_names: Sequence[str],
    prefer_expense_title: bool = False,
) -> tuple[int, int]:
    """Return index of the row with most month labels and that label count."""
    header_index, best_count = -1, 0
    for row_index, row in enumerate(grid[:scan_limit]):
        count = _month_cell_count(row, month_names)
        if count > best_count:
            header_index, best_count = row_index, count
        elif (
            prefer_expense_title
            and count == best_count
            and count > 0
            and _is_expense_title(row)
        ):
            header_index = row_index
    return header_index, best_count


def _month_labels(header: Sequence[str]) -> tuple[str, ...]:
    return tuple(_cell(header, column) or f"Month {column}" for column in MONTH_COLUMNS)


def _monthly_values(row: Sequence[str]) -> tuple[float, ...]:
    return tuple(parse_number(_cell(row, column)) for column in MONTH_COLUMNS)


def _is_reserved_expense_label(name: str) -> bool:
    lower_name = name.lower()
    return (
        name.upper() == "TOTAL"
        or "net income" in lower_name
        or "total monthly" in lower_name
        or EXPENSE_TITLE_MARKER in lower_name
    )


def _log(logs: SyncLogs | None, source: str, anchor: str, action: str) -> None:
    if logs is not None:
        logs.add(source, anchor, action)


def detect_active_year(label: str) -> int | None:
    """Return the year encoded at the end of a month label such as ``Jan-25``."""
    if not (match := _ACTIVE_YEAR.search(label.strip())):
        return None
    year_text = match.group(1)
    return 2000 + int(year_text) if len(year_text) == 2 else int(year_text)


def parse_detailed_expenses(
    rows: Sequence[Sequence[str]],
    logs: SyncLogs | None = None,
    tables: LookupTables = DEFAULT_TABLES,
) -> LedgerData:
    """Rebuild the category -> item tree of a twelve-month expense grid.

    Rows without any non-zero monthly figure open a category; rows with figures are
    items of the currently open category. A blank row closes the open category.
    """
    grid = normalize_rows(rows)
    header_index, month_count = _find_month_header(
        grid, EXPENSE_HEADER_SCAN_LIMIT, tables.month_names, prefer_expense_title=True
    )
    if header_index == -1 or month_count < 2:
        for row_index, row in enumerate(grid):
            if _is_expense_title(row):
                header_index = row_index if _cell(row, 1) else row_index + 1
                break
    if header_index == -1 or header_index >= len(grid) - 1:
        return LedgerData()

    categories: list[LedgerCategory] = []
    open_name: str | None = None
    open_row: int | None = None
    open_items: list[LedgerItem] = []

    def close_category() -> None:
        nonlocal open_name, open_row, open_items
        if open_name is not None:
            categories.append(LedgerCategory.from_items(open_name, open_items, open_row))
        open_name, open_row, open_items = None, None, []

    for row_index in range(header_index + 1, len(grid)):
        row = grid[row_index]
        if not (name := _cell(row, 0)):
            close_category()
            continue
        if not is_safe_key(name, tables.reserved_keys):
            _log(logs, "Detailed Expenses", f"row {row_index + 1}", f"skipped unsafe name {name!r}")
            continue
        if _is_reserved_expense_label(name):
            continue

        values = _monthly_values(row)
        if not any(values):
            close_category()
            open_name, open_row = name, row_index
            continue
        item = LedgerItem.from_values(name, values, row_index)
        if open_name is None:
            categories.append(LedgerCategory.from_items(name, [item], row_index))
        else:
            open_items.append(item)
    close_category()

    return LedgerData(months=_month_labels(grid[header_index]), categories=tuple(categories))


def parse_detailed_income(
    rows: Sequence[Sequence[str]],
    logs: SyncLogs | None = None,
    tables: LookupTables = DEFAULT_TABLES,
) -> LedgerData:
    """Collect income rows of a twelve-month grid under a single category."""
    grid = normalize_rows(rows)
    header_index, _ = _find_month_header(grid, INCOME_HEADER_SCAN_LIMIT, tables.month_names)
    if header_index == -1 or header_index >= len(grid) - 1:
        return LedgerData()

    items: list[LedgerItem] = []
    for row_index in range(header_index + 1, len(grid)):
        row = grid[row_index]
        if not (name := _cell(row, 0)):
            if items:
                break
            continue
        if not is_safe_key(name, tables.reserved_keys):
            _log(logs, "Detailed Income", f"row {row_index + 1}", f"skipped unsafe name {name!r}")
            continue
        lower_name = name.lower()
        if lower_name == "total" or "total income" in lower_name:
            break
        if any(marker in lower_name for marker in ("expense", "outgoing", "liabilities")):
            break
        values = _monthly_values(row)
        if any(values):
            items.append(LedgerItem.from_values(name, values, row_index))

    categories = (
        (LedgerCategory.from_items(INCOME_CATEGORY_NAME, items, header_index),) if items else ()
    )
    return LedgerData(months=_month_labels(grid[header_index]), categories=categories)


class _LedgerParser(TabParser):
    """Shared registry surface of the twelve-month grid parsers."""

    @classmethod
    def empty(cls) -> LedgerData:
        return LedgerData()


@TabRegistry.register
class DetailedExpensesParser(_LedgerParser):
    """Parse the expense categories grid."""

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Detailed Expenses"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "detailed_expenses"

    @classmethod
    def parse(
        cls,
        rows: Sequence[Sequence[str]],
        logs: SyncLogs | None = None,
        tables: LookupTables = DEFAULT_TABLES,
        default_year: int | None = None,
    ) -> LedgerData:
        return parse_detailed_expenses(rows, logs, tables)


@TabRegistry.register
class DetailedIncomeParser(_LedgerParser):
    """Parse the income sources grid."""

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Detailed Income"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "detailed_income"

    @classmethod
    def parse(
        cls,
        rows: Sequence[Sequence[str]],
        logs: SyncLogs | None = None,
        tables: LookupTables = DEFAULT_TABLES,
        default_year: int | None = None,
    ) -> LedgerData:
        return parse_detailed_income(rows, logs, tables)
