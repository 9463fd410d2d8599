"""Debt tab parser implementation."""

import re
from collections.abc import Sequence

from portfolio_sheets.coercers import parse_number
from portfolio_sheets.config import DebtEntry
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser

DEFAULT_DEBT_NAME = "Loan"


@TabRegistry.register
class DebtParser(RecordParser):
    """Parse outstanding debts; the table ends at two consecutive blank rows."""

    id_prefix = "debt"
    stop_after_blank_rows = 2

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Debt"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "debt"

    def parse_row(self, values: Sequence[str], row_index: int) -> DebtEntry | None:
        """Parse one debt, keeping the interest rate magnitude exactly as entered."""
        name = self.columns.cell(values, "name", DEFAULT_DEBT_NAME)
        # A name cell holding a money amount means the name column was misresolved.
        if re.match(r"^\$?\d", name):
            name = DEFAULT_DEBT_NAME
        amount_owed = parse_number(self.columns.cell(values, "amount_owed"))
        interest_rate = parse_number(self.columns.cell(values, "interest_rate"))
        monthly_payment = parse_number(self.columns.cell(values, "monthly_payment"))
        if amount_owed == 0 and monthly_payment == 0 and interest_rate == 0:
            return None
        return DebtEntry(
            id=self.record_id(row_index),
            name=name,
            amount_owed=amount_owed,
            interest_rate=interest_rate,
            monthly_payment=monthly_payment,
        )
