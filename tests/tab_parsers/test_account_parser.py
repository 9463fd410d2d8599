"""Tests for AccountParser."""

from portfolio_sheets.config import BankAccount
from portfolio_sheets.tab_parsers import AccountParser


def test_account_parser_parses_accounts_and_classifies_cards() -> None:
    """Accounts should keep the last four digits and infer Credit or Debit."""
    rows = [
        ["Institution", "Account Name", "Type", "Payment Type", "Account Number", "Purpose"],
        ["TD", "Everyday Chequing", "Chequing", "Debit Card", "123456789", "Bills"],
        ["Amex", "Cobalt", "Credit Card", "Amex", "**** 1005", "Dining"],
        ["", "", "Savings", "", "", ""],
    ]
    assert AccountParser.parse(rows) == (
        BankAccount(
            "account-1",
            "Everyday Chequing",
            "TD",
            "Chequing",
            "Debit Card",
            "6789",
            "Debit",
            "CAD",
            "Bills",
            1,
        ),
        BankAccount(
            "account-2",
            "Cobalt",
            "Amex",
            "Credit Card",
            "Amex",
            "1005",
            "Credit",
            "CAD",
            "Dining",
            2,
        ),
    )


def test_account_parser_prefers_explicit_transaction_type_column() -> None:
    """An explicit transaction-type column should override inference."""
    rows = [["Bank", "Name", "Transaction Type"], ["RBC", "Visa Infinite", "Debit"]]
    (account,) = AccountParser.parse(rows)
    assert account.transaction_type == "Debit"
    assert account.account_number == "****"
    assert account.payment_type == "Card"


def test_infer_transaction_type() -> None:
    """Credit networks anywhere in the text should classify as Credit."""
    assert AccountParser.infer_transaction_type("Card", "Mastercard World") == "Credit"
    assert AccountParser.infer_transaction_type("Savings", "Card") == "Debit"
