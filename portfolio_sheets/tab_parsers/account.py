"""Bank accounts registry tab parser implementation."""

from collections.abc import Sequence

from portfolio_sheets.config import BankAccount
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.tab_parsers.base import RecordParser

DEFAULT_INSTITUTION = "Unknown Bank"
DEFAULT_ACCOUNT_NAME = "Account"
CREDIT_MARKERS = ("credit", "visa", "mastercard", "amex")


@TabRegistry.register
class AccountParser(RecordParser):
    """Parse bank accounts and payment cards."""

    id_prefix = "account"

    @classmethod
    def name(cls) -> str:
        """Return parser name shown in app choices."""
        return "Accounts"

    @classmethod
    def data_type(cls) -> str:
        """Return tab type key."""
        return "accounts"

    @staticmethod
    def infer_transaction_type(*texts: str) -> str:
        """Classify an account as Credit or Debit from its descriptive text."""
        combined = " ".join(texts).lower()
        return "Credit" if any(marker in combined for marker in CREDIT_MARKERS) else "Debit"

    def parse_row(self, values: Sequence[str], row_index: int) -> BankAccount | None:
        institution = self.columns.cell(values, "institution", DEFAULT_INSTITUTION)
        name = self.columns.cell(values, "name", DEFAULT_ACCOUNT_NAME)
        if institution == DEFAULT_INSTITUTION and name == DEFAULT_ACCOUNT_NAME:
            return None
        account_type = self.columns.cell(values, "type", "Checking")
        payment_type = self.columns.cell(values, "payment_type", "Card")
        return BankAccount(
            id=self.record_id(row_index),
            name=name,
            institution=institution,
            type=account_type,
            payment_type=payment_type,
            account_number=self.columns.cell(values, "account_number", "****")[-4:],
            transaction_type=(
                self.columns.cell(values, "transaction_type")
                or self.infer_transaction_type(account_type, payment_type, name)
            ),
            currency="CAD",
            purpose=self.columns.cell(values, "purpose", "General"),
            row_index=row_index,
        )
