"""Net-worth log tab parser implementation."""

from collections.abc import Sequence

from portfolio_sheets.coercers import parse_date, parse_number
from portfolio_sheets.config import NetWorthEntry
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser


@TabRegistry.register
class NetWorthParser(RecordParser):
    """Parse logged net-worth snapshots, one per row."""

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Net Worth Log"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "net_worth"

    def _cell_or_position(self, values: Sequence[str], field_name: str, position: int) -> str:
        if self.columns.has(field_name):
            return self.columns.cell(values, field_name)
        return values[position].strip() if position < len(values) else ""

    def parse_row(self, values: Sequence[str], row_index: int) -> NetWorthEntry | None:
        """Parse one snapshot; columns 0 and 1 stand in for unresolved headers."""
        raw_date = self._cell_or_position(values, "date", 0)
        value = parse_number(self._cell_or_position(values, "value", 1))
        if not raw_date and value == 0:
            return None
        if (entry_date := parse_date(raw_date, self.default_year, self.tables.month_names)) is None:
            return None
        return NetWorthEntry(date=entry_date, value=value)
