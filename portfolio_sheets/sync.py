"""One parse-and-reconcile pass over registered tab sources."""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import cast

from portfolio_sheets.config import Investment, SyncLogs, SyncResult, Trade
from portfolio_sheets.reconciliation import reconcile_investments
from portfolio_sheets.registry import TabRegistry, TabSource
from portfolio_sheets.tab_parsers import InvestmentParser, TradeParser
from portfolio_sheets.tables import DEFAULT_TABLES, LookupTables
from portfolio_sheets.utils import load_tab_rows


def parse_tab(
    data_type: str,
    rows: Sequence[Sequence[str]],
    logs: SyncLogs | None = None,
    tables: LookupTables = DEFAULT_TABLES,
    default_year: int | None = None,
) -> object:
    """Parse raw rows with the parser registered for a tab type."""
    return TabRegistry.get(data_type).parse(rows, logs, tables, default_year)


def _tag_ids(records: tuple, tab_number: int) -> tuple:
    """Suffix positional ids with the tab number so merged tabs keep distinct keys."""
    return tuple(
        replace(record, id=f"{record.id}-tab{tab_number}") if hasattr(record, "id") else record
        for record in records
    )


def _merge(
    data_type: str,
    previous: object,
    parsed: object,
    tab_number: int,
    logs: SyncLogs,
) -> object:
    if isinstance(previous, tuple) and isinstance(parsed, tuple):
        return previous + _tag_ids(parsed, tab_number)
    logs.add(
        TabRegistry.get(data_type).name(),
        data_type,
        "kept first tab, ignored duplicate registration",
    )
    return previous


def run_sync(
    sources: Iterable[TabSource],
    logs: SyncLogs | None = None,
    tables: LookupTables = DEFAULT_TABLES,
    default_year: int | None = None,
) -> SyncResult:
    """Load and parse every source, then reconcile investments against trades."""
    logs = SyncLogs() if logs is None else logs
    if default_year is None:
        default_year = TabRegistry.default_year()
    records: dict[str, object] = {}
    tab_counts: Counter[str] = Counter()
    for source in sources:
        rows = load_tab_rows(source.path)
        parsed = parse_tab(source.data_type, rows, logs, tables, default_year)
        tab_counts[source.data_type] += 1
        if source.data_type in records:
            parsed = _merge(
                source.data_type,
                records[source.data_type],
                parsed,
                tab_counts[source.data_type],
                logs,
            )
        records[source.data_type] = parsed

    investments = cast(tuple[Investment, ...], records.get(InvestmentParser.data_type(), ()))
    trades = cast(tuple[Trade, ...], records.get(TradeParser.data_type(), ()))
    holdings = (
        reconcile_investments(investments, trades, logs, tables) if investments or trades else ()
    )
    return SyncResult(records=records, holdings=holdings, logs=logs)
