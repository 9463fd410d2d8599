"""Merge the holdings snapshot with the trade ledger into current positions."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from portfolio_sheets.coercers import UNKNOWN_TICKER, normalize_ticker
from portfolio_sheets.config import (
    Investment,
    LogChange,
    ReconciledHolding,
    SyncLogs,
    Trade,
)
from portfolio_sheets.tables import DEFAULT_TABLES, LookupTables

SOURCE_NAME = "Reconciliation"
MIN_QUANTITY = 0.000001
_ISO_DAY = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(slots=True)
class TradeFold:
    """Running per-ticker position built from date-ordered trades."""

    ticker: str
    first_raw_ticker: str
    quantity: float = 0.0
    avg_price: float = 0.0
    has_buys: bool = False
    trade_count: int = 0
    last_price: float | None = None

    def apply(self, trade: Trade) -> None:
        """Fold one trade; buys move the weighted-average cost, sells keep it."""
        if trade.side == "BUY":
            cost = trade.total or trade.quantity * trade.price
            held = max(self.quantity, 0.0)
            self.avg_price = (self.avg_price * held + cost) / (held + trade.quantity)
            self.has_buys = True
        self.quantity += trade.signed_quantity
        self.trade_count += 1
        self.last_price = trade.market_price or trade.price or self.last_price


def _date_key(trade: Trade) -> tuple[bool, str]:
    # Undated trades and raw unparsed dates keep their ledger order after every ISO date.
    if trade.date is not None and _ISO_DAY.fullmatch(trade.date):
        return (False, trade.date)
    return (True, "")


def _chronological(trades: Iterable[Trade]) -> list[Trade]:
    return sorted(trades, key=_date_key)


def fold_trades(
    trades: Iterable[Trade],
    tables: LookupTables = DEFAULT_TABLES,
) -> dict[str, TradeFold]:
    """Return per-ticker folds keyed by normalized ticker in first-trade order."""
    folds: dict[str, TradeFold] = {}
    for trade in _chronological(trades):
        ticker = normalize_ticker(trade.ticker, tables.ticker_aliases)
        if ticker == UNKNOWN_TICKER or trade.quantity == 0:
            continue
        if ticker not in folds:
            folds[ticker] = TradeFold(ticker=ticker, first_raw_ticker=trade.ticker)
        folds[ticker].apply(trade)
    return folds


def holding_value(
    quantity: float,
    price: float,
    manual_market_value: float | None = None,
    is_live: bool = False,
) -> float:
    """Return position value, preferring a positive manual value unless priced live."""
    if abs(quantity) < MIN_QUANTITY:
        return 0.0
    if is_live:
        return quantity * price
    if (manual_market_value or 0) > 0:
        return manual_market_value
    return quantity * price


def _fmt(value: float | None) -> str:
    return "-" if value is None else f"{value:g}"


def _passthrough(investment: Investment) -> ReconciledHolding:
    return ReconciledHolding(
        id=investment.id,
        ticker=investment.ticker,
        name=investment.name,
        quantity=investment.quantity,
        avg_price=investment.avg_price,
        current_price=investment.current_price,
        account_name=investment.account_name,
        asset_class=investment.asset_class,
        market_value=investment.market_value,
    )


def _overlay(
    group: Sequence[Investment],
    fold: TradeFold,
    logs: SyncLogs | None,
) -> ReconciledHolding:
    first = group[0]
    snapshot_quantity = sum(investment.quantity for investment in group)
    avg_price = fold.avg_price if fold.has_buys else first.avg_price
    account_name = ", ".join(dict.fromkeys(investment.account_name for investment in group))
    if logs is not None:
        changes: list[LogChange] = [
            {
                "name": "Quantity",
                "before": _fmt(snapshot_quantity),
                "after": _fmt(fold.quantity),
            },
            {"name": "Avg price", "before": _fmt(first.avg_price), "after": _fmt(avg_price)},
        ]
        logs.add(SOURCE_NAME, fold.ticker, f"overlaid {fold.trade_count} trade(s)", changes)
    return ReconciledHolding(
        id=first.id,
        ticker=first.ticker,
        name=first.name,
        quantity=fold.quantity,
        avg_price=avg_price,
        current_price=first.current_price,
        account_name=account_name,
        asset_class=first.asset_class,
        market_value=fold.quantity * first.current_price,
        trade_count=fold.trade_count,
        last_trade_price=fold.last_price,
    )


def _synthesize(
    fold: TradeFold,
    logs: SyncLogs | None,
    tables: LookupTables,
) -> ReconciledHolding:
    if fold.ticker in tables.crypto_tickers:
        account_name, asset_class = "Crypto Wallet", "Crypto"
    else:
        account_name, asset_class = "Uncategorized", "Trade Derived"
    if logs is not None:
        changes: list[LogChange] = [
            {"name": "Quantity", "before": "-", "after": _fmt(fold.quantity)},
            {"name": "Avg price", "before": "-", "after": _fmt(fold.avg_price)},
        ]
        logs.add(SOURCE_NAME, fold.ticker, "added synthetic holding", changes)
    return ReconciledHolding(
        id=f"synthetic-{fold.ticker}",
        ticker=fold.ticker,
        name=fold.first_raw_ticker,
        quantity=fold.quantity,
        avg_price=fold.avg_price,
        current_price=None,
        account_name=account_name,
        asset_class=asset_class,
        market_value=None,
        synthetic=True,
        trade_count=fold.trade_count,
        last_trade_price=fold.last_price,
    )


def reconcile_investments(
    investments: Sequence[Investment],
    trades: Sequence[Trade],
    logs: SyncLogs | None = None,
    tables: LookupTables = DEFAULT_TABLES,
) -> tuple[ReconciledHolding, ...]:
    """Return current holdings with the trade ledger authoritative for quantity and cost.

    Every traded ticker yields exactly one holding: snapshot rows sharing it are
    merged, and tickers missing from the snapshot become synthetic holdings without
    a price. Snapshot rows for untraded tickers pass through unchanged, and rows
    whose ticker cannot be resolved are left out. Snapshot holdings come first in
    snapshot order, then synthetic ones in first-trade order.
    """
    folds = fold_trades(trades, tables)
    groups: dict[str, list[Investment]] = {}
    for investment in investments:
        ticker = normalize_ticker(investment.ticker, tables.ticker_aliases)
        if ticker == UNKNOWN_TICKER:
            continue
        groups.setdefault(ticker, []).append(investment)

    holdings: list[ReconciledHolding] = []
    merged: set[str] = set()
    for investment in investments:
        ticker = normalize_ticker(investment.ticker, tables.ticker_aliases)
        if ticker == UNKNOWN_TICKER:
            continue
        if ticker not in folds:
            holdings.append(_passthrough(investment))
        elif ticker not in merged:
            holdings.append(_overlay(groups[ticker], folds[ticker], logs))
            merged.add(ticker)

    holdings.extend(
        _synthesize(fold, logs, tables) for ticker, fold in folds.items() if ticker not in groups
    )
    return tuple(holdings)
