"""Tab parser implementations and parser base classes."""

from portfolio_sheets.tab_parsers.account import AccountParser
from portfolio_sheets.tab_parsers.asset import AssetParser
from portfolio_sheets.tab_parsers.base import RecordParser, TabParser
from portfolio_sheets.tab_parsers.cashflow import IncomeAndExpensesParser
from portfolio_sheets.tab_parsers.debt import DebtParser
from portfolio_sheets.tab_parsers.investment import InvestmentParser
from portfolio_sheets.tab_parsers.ledger import DetailedExpensesParser, DetailedIncomeParser
from portfolio_sheets.tab_parsers.net_worth import NetWorthParser
from portfolio_sheets.tab_parsers.subscription import SubscriptionParser
from portfolio_sheets.tab_parsers.trade import TradeParser

__all__ = [
    "AccountParser",
    "AssetParser",
    "DebtParser",
    "DetailedExpensesParser",
    "DetailedIncomeParser",
    "IncomeAndExpensesParser",
    "InvestmentParser",
    "NetWorthParser",
    "RecordParser",
    "SubscriptionParser",
    "TabParser",
    "TradeParser",
]
