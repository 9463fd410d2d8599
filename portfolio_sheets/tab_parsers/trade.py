"""Trade ledger tab parser implementation."""

from collections.abc import Sequence

from portfolio_sheets.coercers import parse_date, parse_number
from portfolio_sheets.config import Trade, TradeSide
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser

SELL_MARKERS = ("SELL", "SOLD", "OUT")


@TabRegistry.register
class TradeParser(RecordParser):
    """Parse the append-only trade ledger."""

    id_prefix = "trade"

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Trades"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "trades"

    @staticmethod
    def infer_side(action: str, quantity: float) -> TradeSide:
        """Infer trade side from action text or a negative quantity."""
        action_upper = action.upper()
        if quantity < 0 or any(marker in action_upper for marker in SELL_MARKERS):
            return "SELL"
        return "BUY"

    def parse_row(self, values: Sequence[str], row_index: int) -> Trade | None:
        """Parse one trade, deriving whichever of price and total is missing."""
        if not (ticker := self.columns.cell(values, "ticker")):
            return None
        raw_date = self.columns.cell(values, "date")
        trade_date = parse_date(raw_date, self.default_year, self.tables.month_names) or (
            raw_date or None
        )
        quantity = parse_number(self.columns.cell(values, "quantity"))
        price = parse_number(self.columns.cell(values, "price"))
        total = parse_number(self.columns.cell(values, "total"))
        if total == 0 and quantity != 0 and price != 0:
            total = quantity * price
        if price == 0 and quantity != 0 and total != 0:
            price = total / quantity
        market_price = abs(parse_number(self.columns.cell(values, "market_price")))
        return Trade(
            id=self.record_id(row_index),
            date=trade_date,
            ticker=ticker,
            side=self.infer_side(self.columns.cell(values, "side"), quantity),
            quantity=abs(quantity),
            price=abs(price),
            total=abs(total),
            fee=parse_number(self.columns.cell(values, "fee")),
            market_price=market_price or None,
            row_index=row_index,
        )
