"""Tests for InvestmentParser."""

from portfolio_sheets.config import Investment
from portfolio_sheets.tab_parsers import InvestmentParser

HEADERS = [
    "Ticker",
    "Name",
    "Quantity",
    "Avg Cost",
    "Price",
    "Account",
    "Asset Class",
    "Market Value",
]


def test_investment_parser_parses_positions() -> None:
    """Positions should coerce numbers and fall back to documented defaults."""
    rows = [
        HEADERS,
        ["AAPL", "Apple", "10", "$150", "$190", "TFSA", "Equity", ""],
        ["VFV", "Vanguard S&P", "5", "100", "", "RRSP", "ETF", "$600"],
        ["", "", "0", "", "", "", "", ""],
        ["", "Mystery Fund", "3", "10", "11", "", "", ""],
    ]
    assert InvestmentParser.parse(rows) == (
        Investment("investment-1", "AAPL", "Apple", 10.0, 150.0, 190.0, "TFSA", "Equity", None),
        Investment("investment-2", "VFV", "Vanguard S&P", 5.0, 100.0, 120.0, "RRSP", "ETF", 600.0),
        Investment(
            "investment-4",
            "Mystery Fund",
            "Mystery Fund",
            3.0,
            10.0,
            11.0,
            "Uncategorized",
            "Other",
            None,
        ),
    )


def test_investment_parser_skips_title_rows_above_header() -> None:
    """Headers below a title block should still be located."""
    rows = [["Holdings", "", ""], ["", "", ""], ["Symbol", "Qty", "Price"], ["XEQT", "2", "30"]]
    (investment,) = InvestmentParser.parse(rows)
    assert investment.ticker == "XEQT"
    assert investment.quantity == 2.0
    assert investment.current_price == 30.0
    assert investment.id == "investment-3"
