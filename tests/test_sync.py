"""Tests for the parse-and-reconcile sync pass."""

from pathlib import Path

import pytest

from portfolio_sheets.config import LedgerData, SyncLogs
from portfolio_sheets.registry import TabSource
from portfolio_sheets.sync import parse_tab, run_sync


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


@pytest.fixture
def portfolio_sources(tmp_path: Path) -> list[TabSource]:
    """Return sources for a snapshot tab and two trade-ledger tabs."""
    investments = _write(
        tmp_path / "investments.csv",
        "Ticker,Name,Quantity,Avg Cost,Price,Account,Asset Class\n"
        "AAPL,Apple,99,100,200,TFSA,Equity\n"
        "XEQT,iShares All-Equity,4,25,30,RRSP,ETF\n",
    )
    stocks = _write(
        tmp_path / "stocks.csv",
        "Date,Ticker,Action,Quantity,Price,Total,Fee\n"
        "2025-01-02,AAPL,Buy,10,150,1500,0\n",
    )
    crypto = _write(
        tmp_path / "crypto.csv",
        "Date,Ticker,Action,Quantity,Price,Total,Fee\n"
        "2025-01-03,ETH,Buy,2,3000,6000,0\n",
    )
    return [
        TabSource("investments", investments),
        TabSource("trades", stocks),
        TabSource("trades", crypto),
    ]


def test_run_sync_parses_merges_and_reconciles(portfolio_sources: list[TabSource]) -> None:
    """Trade tabs of one type should concatenate before reconciliation."""
    logs = SyncLogs()
    result = run_sync(portfolio_sources, logs)

    assert result.logs is logs
    assert [trade.ticker for trade in result.records["trades"]] == ["AAPL", "ETH"]
    assert [trade.id for trade in result.records["trades"]] == ["trade-1", "trade-1-tab2"]
    assert [trade.row_index for trade in result.records["trades"]] == [1, 1]
    assert [holding.ticker for holding in result.holdings] == ["AAPL", "XEQT", "ETH"]
    aapl, xeqt, eth = result.holdings
    assert aapl.quantity == 10 and aapl.avg_price == 150 and aapl.market_value == 2000
    assert xeqt.quantity == 4 and xeqt.trade_count == 0
    assert eth.synthetic and eth.account_name == "Crypto Wallet"
    assert any("overlaid 1 trade(s)" in line for line in logs)
    assert any("added synthetic holding" in line for line in logs)
    assert list(result.tables()) == ["investments", "trades", "holdings"]


def test_run_sync_without_investments_or_trades_has_no_holdings(tmp_path: Path) -> None:
    """Tabs unrelated to positions should not produce holdings."""
    debt = _write(
        tmp_path / "debt.csv",
        "Name,Amount Owed,Interest Rate,Monthly Payment\nCar Loan,12000,5.5,300\n",
    )
    result = run_sync([TabSource("debt", debt)])
    assert result.holdings == ()
    assert len(result.records["debt"]) == 1


def test_run_sync_keeps_first_of_duplicate_grouped_tabs(golden_dir: Path) -> None:
    """Grouped tab types cannot concatenate, so the first registration wins."""
    path = str(golden_dir / "detailed_expenses.csv")
    logs = SyncLogs()
    result = run_sync(
        [TabSource("detailed_expenses", path), TabSource("detailed_expenses", path)],
        logs,
    )
    assert isinstance(result.records["detailed_expenses"], LedgerData)
    assert any("kept first tab, ignored duplicate registration" in line for line in logs)


def test_run_sync_propagates_missing_files(tmp_path: Path) -> None:
    """Unreadable exports should surface to the caller."""
    with pytest.raises(FileNotFoundError):
        run_sync([TabSource("trades", str(tmp_path / "missing.csv"))])


def test_parse_tab_dispatches_by_data_type() -> None:
    """parse_tab should hand rows to the registered parser."""
    rows = [["Name", "Amount Owed", "Interest Rate"], ["Visa", "500", "0.2"]]
    (debt,) = parse_tab("debt", rows)
    assert debt.name == "Visa"
    assert debt.amount_owed == 500


def test_parse_tab_rejects_unknown_data_type() -> None:
    """Unknown tab types should raise."""
    with pytest.raises(ValueError, match="Unknown tab type"):
        parse_tab("crypto", [["a"], ["b"]])


def test_run_sync_keeps_holding_ids_distinct_across_snapshot_tabs(tmp_path: Path) -> None:
    """Holdings from two snapshot tabs should not share identity keys."""
    header = "Ticker,Name,Quantity,Avg Cost,Price,Account,Asset Class\n"
    tfsa = _write(tmp_path / "tfsa.csv", header + "XEQT,iShares,4,25,30,TFSA,ETF\n")
    rrsp = _write(tmp_path / "rrsp.csv", header + "VFV,Vanguard,2,90,100,RRSP,ETF\n")
    result = run_sync([TabSource("investments", tfsa), TabSource("investments", rrsp)])
    ids = [holding.id for holding in result.holdings]
    assert ids == ["investment-1", "investment-1-tab2"]
