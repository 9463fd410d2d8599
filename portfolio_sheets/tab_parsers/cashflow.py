"""Flat income and expense time-series extraction from cash-flow tabs."""

from collections.abc import Sequence

from portfolio_sheets.coercers import is_safe_key, parse_date, parse_number
from portfolio_sheets.config import ExpenseEntry, IncomeAndExpenses, IncomeEntry, SyncLogs
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import TabParser
from portfolio_sheets.tables import DEFAULT_TABLES, LookupTables
from portfolio_sheets.utils import Rows, normalize_rows

SOURCE_NAME = "Income & Expenses"
DATE_ROW_SCAN_CELLS = 6
RESERVED_EXPENSE_MARKERS = (
    "net income",
    "total",
    "monthly savings",
    "balance",
    "expense categorie",
)


def _has_data(row: Sequence[str]) -> bool:
    return any(parse_number(cell) != 0 for cell in row[1:])


def _nearest_preceding(date_rows: Sequence[int], row_index: int) -> int | None:
    anchors = [index for index in date_rows if index < row_index]
    return anchors[-1] if anchors else None


class _CashFlowSheet:
    """Row classification of one cash-flow sheet."""

    def __init__(
        self,
        grid: Rows,
        tables: LookupTables,
        default_year: int | None,
        logs: SyncLogs | None,
    ) -> None:
        self.grid = grid
        self.tables = tables
        self.default_year = default_year
        self.logs = logs
        self.date_rows: list[int] = []
        self.income_row: int | None = None
        self.expense_rows: list[int] = []
        self._classify()

    def log(self, anchor: str, action: str) -> None:
        if self.logs is not None:
            self.logs.add(SOURCE_NAME, anchor, action)

    def parse_date(self, value: str) -> str | None:
        return parse_date(value, self.default_year, self.tables.month_names)

    def is_date_row(self, row: Sequence[str]) -> bool:
        """Return whether at least two of the leading value cells parse as dates."""
        cells = row[1:DATE_ROW_SCAN_CELLS]
        return sum(1 for cell in cells if self.parse_date(cell)) >= 2

    def _classify(self) -> None:
        income_priority = 0
        for row_index, row in enumerate(self.grid):
            label = row[0].strip() if row else ""
            lower_label = label.lower()
            if self.is_date_row(row):
                self.date_rows.append(row_index)
                continue
            if "income" in lower_label and "net" not in lower_label:
                if _has_data(row):
                    priority = 2 if "total" in lower_label else 1
                    if priority > income_priority:
                        self.income_row, income_priority = row_index, priority
                continue
            if not lower_label or any(m in lower_label for m in RESERVED_EXPENSE_MARKERS):
                continue
            if not is_safe_key(label, self.tables.reserved_keys):
                self.log(f"row {row_index + 1}", f"skipped unsafe name {label!r}")
                continue
            if _has_data(row):
                self.expense_rows.append(row_index)

    def dated_columns(self, date_row_index: int) -> list[tuple[int, str, str]]:
        """Return column index, ISO date and raw label of each dated cell."""
        columns = []
        for column, cell in enumerate(self.grid[date_row_index][1:], start=1):
            if iso_date := self.parse_date(cell):
                columns.append((column, iso_date, cell.strip()))
        return columns

    def income(self) -> list[IncomeEntry]:
        """Return income amounts anchored to the nearest preceding date row."""
        if self.income_row is None:
            return []
        anchor = _nearest_preceding(self.date_rows, self.income_row)
        if anchor is None:
            self.log(f"row {self.income_row + 1}", "skipped income row without a date row")
            return []
        values = self.grid[self.income_row]
        return [
            IncomeEntry(date=iso_date, month_label=label, amount=parse_number(values[column]))
            for column, iso_date, label in self.dated_columns(anchor)
        ]

    def expenses(self) -> list[ExpenseEntry]:
        """Return per-date expense breakdowns summed by category name."""
        by_date: dict[str, dict[str, float]] = {}
        labels: dict[str, str] = {}
        for row_index in self.expense_rows:
            anchor = _nearest_preceding(self.date_rows, row_index)
            if anchor is None:
                self.log(f"row {row_index + 1}", "skipped expense row without a date row")
                continue
            values = self.grid[row_index]
            name = values[0].strip()
            for column, iso_date, label in self.dated_columns(anchor):
                categories = by_date.setdefault(iso_date, {})
                labels.setdefault(iso_date, label)
                categories[name] = categories.get(name, 0.0) + abs(parse_number(values[column]))
        return [
            ExpenseEntry.from_categories(iso_date, labels[iso_date], categories)
            for iso_date, categories in by_date.items()
            if sum(categories.values()) > 0
        ]


def parse_income_and_expenses(
    rows: Sequence[Sequence[str]],
    logs: SyncLogs | None = None,
    tables: LookupTables = DEFAULT_TABLES,
    default_year: int | None = None,
) -> IncomeAndExpenses:
    """Extract income and expense series by pairing value rows with date rows.

    Each income or expense row takes its calendar dates from the nearest date row
    above it, so sheets with several dated sections keep their own anchors. A sheet
    matching none of the accepted shapes is returned empty and flagged as unmapped.
    """
    grid = normalize_rows(rows)
    sheet = _CashFlowSheet(grid, tables, default_year, logs)
    if not sheet.date_rows or (sheet.income_row is None and not sheet.expense_rows):
        sheet.log("sheet", "needs manual mapping")
        return IncomeAndExpenses(unmapped=True)
    return IncomeAndExpenses(
        income=tuple(sorted(sheet.income(), key=lambda entry: entry.date)),
        expenses=tuple(sorted(sheet.expenses(), key=lambda entry: entry.date)),
    )


@TabRegistry.register
class IncomeAndExpensesParser(TabParser):
    """Parse the monthly cash-flow tab into income and expense series."""

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return SOURCE_NAME

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "income"

    @classmethod
    def empty(cls) -> IncomeAndExpenses:
        return IncomeAndExpenses()

    @classmethod
    def parse(
        cls,
        rows: Sequence[Sequence[str]],
        logs: SyncLogs | None = None,
        tables: LookupTables = DEFAULT_TABLES,
        default_year: int | None = None,
    ) -> IncomeAndExpenses:
        if len(rows) < 2:
            return cls.empty()
        return parse_income_and_expenses(rows, logs, tables, default_year)
