"""Investments snapshot tab parser implementation."""

from collections.abc import Sequence

from portfolio_sheets.coercers import parse_number
from portfolio_sheets.config import Investment
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser

DEFAULT_INVESTMENT_NAME = "Unknown Investment"


@TabRegistry.register
class InvestmentParser(RecordParser):
    """Parse the static holdings snapshot, one position per row."""

    id_prefix = "investment"

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Investments"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "investments"

    def parse_row(self, values: Sequence[str], row_index: int) -> Investment | None:
        """Parse one position, deriving price from market value when missing."""
        name = self.columns.cell(values, "name", DEFAULT_INVESTMENT_NAME)
        ticker = self.columns.cell(values, "ticker", name)
        quantity = parse_number(self.columns.cell(values, "quantity"))
        if ticker == DEFAULT_INVESTMENT_NAME and quantity == 0:
            return None
        current_price = parse_number(self.columns.cell(values, "current_price"))
        market_value = parse_number(self.columns.cell(values, "market_value"))
        if current_price == 0 and quantity != 0 and market_value != 0:
            current_price = market_value / quantity
        return Investment(
            id=self.record_id(row_index),
            ticker=ticker,
            name=name,
            quantity=quantity,
            avg_price=parse_number(self.columns.cell(values, "avg_price")),
            current_price=current_price,
            account_name=self.columns.cell(values, "account_name", "Uncategorized"),
            asset_class=self.columns.cell(values, "asset_class", "Other"),
            market_value=market_value or None,
        )
