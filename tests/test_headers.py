"""Tests for header row detection and column resolution."""

from portfolio_sheets.headers import (
    ABSENT,
    ColumnMap,
    find_header_row,
    normalize_header,
    resolve_column_index,
)
from portfolio_sheets.tables import DEFAULT_TABLES


def test_normalize_header_drops_case_and_punctuation() -> None:
    """normalize_header should keep only lower-case alphanumerics."""
    assert normalize_header(" Avg. Price ($) ") == "avgprice"
    assert normalize_header(None) == ""


def test_resolve_column_index_prefers_exact_match_per_hint() -> None:
    """An exact normalized match should win over an earlier substring match."""
    headers = ["Market Value", "Value"]
    assert resolve_column_index(headers, ["value"]) == 1


def test_resolve_column_index_falls_back_to_substring_match() -> None:
    """Substring matches should be used when no exact match exists."""
    headers = ["Trade Date", "Symbol"]
    assert resolve_column_index(headers, ["date"]) == 0


def test_resolve_column_index_honours_hint_order() -> None:
    """Earlier hints should win over later ones even when columns come first."""
    headers = ["Symbol", "Ticker"]
    assert resolve_column_index(headers, ["ticker", "symbol"]) == 1


def test_resolve_column_index_returns_absent_when_nothing_matches() -> None:
    """Unresolvable fields should map to the ABSENT sentinel."""
    assert resolve_column_index(["Foo", "Bar"], ["ticker"]) == ABSENT


def test_column_map_is_independent_of_column_order() -> None:
    """Permuting headers should permute resolved indices consistently."""
    hints = DEFAULT_TABLES.field_hints["trades"]
    headers = ["Date", "Ticker", "Quantity", "Price", "Type"]
    values = ["2025-01-02", "AAPL", "10", "150", "Buy"]
    permutation = [4, 2, 0, 3, 1]
    original = ColumnMap.resolve(headers, hints)
    permuted = ColumnMap.resolve([headers[i] for i in permutation], hints)
    permuted_values = [values[i] for i in permutation]
    for field_name in ("date", "ticker", "quantity", "price", "side"):
        assert original.cell(values, field_name) == permuted.cell(permuted_values, field_name)


def test_column_map_cell_defaults_for_absent_and_short_rows() -> None:
    """cell should return the default for unresolved fields and missing cells."""
    columns = ColumnMap.resolve(["Name", "Value"], {"name": ("name",), "value": ("value",)})
    assert columns.cell(["House"], "value") == ""
    assert columns.cell(["House"], "value", "0") == "0"
    assert columns.cell(["  House  ", "1"], "name") == "House"
    assert columns.cell(["House", "1"], "missing", "x") == "x"
    assert columns.has("name") is True
    assert columns.has("missing") is False


def test_find_header_row_skips_title_rows_and_blank_rows() -> None:
    """Single-cell title rows should not be accepted as headers."""
    rows = [
        ["My Portfolio", "", ""],
        ["", "", ""],
        ["Ticker", "Quantity", "Avg Cost"],
        ["AAPL", "10", "150"],
    ]
    assert find_header_row(rows, DEFAULT_TABLES.header_keywords["investments"]) == 2


def test_find_header_row_takes_first_matching_row_top_down() -> None:
    """An earlier header with plural labels should beat a later exact-token row."""
    rows = [
        ["Accounts", "Balances"],
        ["TFSA account", "5000"],
        ["Name", "Balance"],
    ]
    assert find_header_row(rows, DEFAULT_TABLES.header_keywords["assets"]) == 0


def test_find_header_row_accepts_substring_matches() -> None:
    """Keywords contained in longer labels should qualify a row."""
    rows = [["", ""], ["Tickers", "Quantities"], ["AAPL", "1"]]
    assert find_header_row(rows, ("ticker",)) == 1


def test_find_header_row_falls_back_to_first_non_empty_row() -> None:
    """Without keyword matches the first non-empty row should be used."""
    rows = [["", ""], ["foo", "bar"], ["1", "2"]]
    assert find_header_row(rows, ("ticker",)) == 1
    assert find_header_row([["", ""]], ("ticker",)) == ABSENT


def test_find_header_row_scans_only_leading_rows() -> None:
    """Keyword rows beyond the scan limit should not be chosen."""
    rows = [["a", "b"]] + [["", ""]] * 20 + [["Ticker", "Qty"]]
    assert find_header_row(rows, ("ticker",), scan_limit=15) == 0
