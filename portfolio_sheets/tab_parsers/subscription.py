"""Subscriptions tab parser implementation."""

from collections.abc import Sequence

from portfolio_sheets.coercers import parse_number
from portfolio_sheets.config import Subscription
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser

DEFAULT_SUBSCRIPTION_NAME = "Unknown Service"
INACTIVE_MARKERS = frozenset({"false", "no", "inactive", "cancelled"})


@TabRegistry.register
class SubscriptionParser(RecordParser):
    """Parse recurring payments."""

    id_prefix = "subscription"

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Subscriptions"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "subscriptions"

    def parse_row(self, values: Sequence[str], row_index: int) -> Subscription | None:
        name = self.columns.cell(values, "name", DEFAULT_SUBSCRIPTION_NAME)
        cost = parse_number(self.columns.cell(values, "cost"))
        if cost <= 0 and name == DEFAULT_SUBSCRIPTION_NAME:
            return None
        active_raw = self.columns.cell(values, "active").lower()
        return Subscription(
            id=self.record_id(row_index),
            name=name,
            cost=cost,
            period=self.columns.cell(values, "period", "Monthly"),
            category=self.columns.cell(values, "category", "General"),
            active=active_raw not in INACTIVE_MARKERS,
            payment_method=self.columns.cell(values, "payment_method"),
            row_index=row_index,
        )
