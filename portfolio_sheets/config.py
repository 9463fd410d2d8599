"""Core domain records, sync results and the shared log sink."""

from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field, fields
from types import MappingProxyType
from typing import Literal, Mapping, TypedDict

import pandas as pd

PromptValidator = Callable[[str], bool | str]
TradeSide = Literal["BUY", "SELL"]


class LogChange(TypedDict):
    """One before/after change shown under a log header."""

    name: str
    before: str
    after: str


class SyncLogs(list[str]):
    """Ordered sink of formatted diagnostic lines collected during one sync."""

    def add(
        self,
        source: str,
        anchor: str,
        action: str,
        changes: Sequence[LogChange] = (),
    ) -> None:
        """Append one colored log line with optional change bullets."""
        header = (
            f"[\x1b[36m{source}\x1b[0m] "
            f"[\x1b[95m{anchor}\x1b[0m] "
            f"[\x1b[33m{action}\x1b[0m]"
        )
        bullets = [
            (
                f" \x1b[36m•\x1b[0m {change['name']}: "
                f"\x1b[31m{change['before']}\x1b[0m -> "
                f"\x1b[32m{change['after']}\x1b[0m"
            )
            for change in changes
        ]
        self.append("\n".join([header, *bullets]))


@dataclass(frozen=True, slots=True)
class Asset:
    """Non-investment holding such as a bank balance, property or vehicle."""

    id: str
    name: str
    type: str
    value: float
    currency: str
    last_updated: str | None = None
    row_index: int | None = None


@dataclass(frozen=True, slots=True)
class Investment:
    """Static investment position as maintained in the holdings snapshot."""

    id: str
    ticker: str
    name: str
    quantity: float
    avg_price: float
    current_price: float
    account_name: str
    asset_class: str
    market_value: float | None = None


@dataclass(frozen=True, slots=True)
class Trade:
    """One trade-ledger entry; quantity is unsigned and the side carries direction."""

    id: str
    date: str | None
    ticker: str
    side: TradeSide
    quantity: float
    price: float
    total: float
    fee: float = 0.0
    market_price: float | None = None
    row_index: int | None = None

    @property
    def signed_quantity(self) -> float:
        """Return quantity signed by trade side."""
        return -self.quantity if self.side == "SELL" else self.quantity


@dataclass(frozen=True, slots=True)
class Subscription:
    """Recurring payment."""

    id: str
    name: str
    cost: float
    period: str
    category: str
    active: bool
    payment_method: str = ""
    row_index: int | None = None


@dataclass(frozen=True, slots=True)
class BankAccount:
    """Bank account or card registry entry."""

    id: str
    name: str
    institution: str
    type: str
    payment_type: str
    account_number: str
    transaction_type: str
    currency: str
    purpose: str
    row_index: int | None = None


@dataclass(frozen=True, slots=True)
class NetWorthEntry:
    """Logged net-worth snapshot."""

    date: str
    value: float
    currency: str | None = None


@dataclass(frozen=True, slots=True)
class DebtEntry:
    """Outstanding debt with its raw interest-rate magnitude."""

    id: str
    name: str
    amount_owed: float
    interest_rate: float
    monthly_payment: float
    date: str | None = None

    @property
    def annual_rate(self) -> float:
        """Return the interest rate as a fraction, reading values of 1 or more as percents."""
        return self.interest_rate / 100 if abs(self.interest_rate) >= 1 else self.interest_rate


@dataclass(frozen=True, slots=True)
class LedgerItem:
    """Budget line with exactly twelve monthly figures."""

    name: str
    monthly_values: tuple[float, ...]
    total: float
    row_index: int | None = None

    @classmethod
    def from_values(cls, name: str, values: Sequence[float], row_index: int) -> "LedgerItem":
        """Build an item whose total is the sum of its monthly figures."""
        monthly_values = tuple(float(value) for value in values)
        return cls(name, monthly_values, sum(monthly_values), row_index)


@dataclass(frozen=True, slots=True)
class LedgerCategory:
    """Budget category owning an ordered list of line items."""

    name: str
    items: tuple[LedgerItem, ...] = ()
    total: float = 0.0
    row_index: int | None = None

    @classmethod
    def from_items(
        cls,
        name: str,
        items: Sequence[LedgerItem],
        row_index: int | None,
    ) -> "LedgerCategory":
        """Build a category whose total is the sum of its item totals."""
        return cls(name, tuple(items), sum(item.total for item in items), row_index)


@dataclass(frozen=True, slots=True)
class LedgerData:
    """Twelve-month ledger grid: period labels plus category tree."""

    months: tuple[str, ...] = ()
    categories: tuple[LedgerCategory, ...] = ()


@dataclass(frozen=True, slots=True)
class IncomeEntry:
    """Date-stamped income amount."""

    date: str
    month_label: str
    amount: float


@dataclass(frozen=True, slots=True)
class ExpenseEntry:
    """Date-stamped expense total with a per-category breakdown."""

    date: str
    month_label: str
    categories: Mapping[str, float]
    total: float

    @classmethod
    def from_categories(
        cls,
        date: str,
        month_label: str,
        categories: Mapping[str, float],
    ) -> "ExpenseEntry":
        """Build an entry whose total is the sum of the category breakdown."""
        frozen = MappingProxyType(dict(categories))
        return cls(date, month_label, frozen, sum(frozen.values()))


@dataclass(frozen=True, slots=True)
class IncomeAndExpenses:
    """Flat income and expense time series extracted from a cash-flow tab."""

    income: tuple[IncomeEntry, ...] = ()
    expenses: tuple[ExpenseEntry, ...] = ()
    unmapped: bool = False


@dataclass(frozen=True, slots=True)
class ReconciledHolding:
    """Trade-authoritative view of a position merged with snapshot metadata."""

    id: str
    ticker: str
    name: str
    quantity: float
    avg_price: float
    current_price: float | None
    account_name: str
    asset_class: str
    market_value: float | None
    synthetic: bool = False
    trade_count: int = 0
    last_trade_price: float | None = None


@dataclass
class SyncResult:
    """Everything produced by one parse-and-reconcile pass over registered tabs."""

    records: dict[str, object] = field(default_factory=dict)
    holdings: tuple[ReconciledHolding, ...] = ()
    logs: SyncLogs = field(default_factory=SyncLogs)

    def tables(self) -> dict[str, pd.DataFrame]:
        """Return one display dataframe per non-empty parsed tab plus holdings."""
        tables: dict[str, pd.DataFrame] = {}
        for data_type, parsed in self.records.items():
            df = to_dataframe(parsed)
            if not df.empty:
                tables[data_type] = df
        if self.holdings:
            tables["holdings"] = to_dataframe(self.holdings)
        return tables


def _ledger_rows(ledger: LedgerData) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for category in ledger.categories:
        for item in category.items:
            rows.append(
                {
                    "Category": category.name,
                    "Item": item.name,
                    **dict(zip(ledger.months, item.monthly_values)),
                    "Total": item.total,
                }
            )
    return rows


def to_dataframe(parsed: object) -> pd.DataFrame:
    """Convert parsed records or grouped tab results into a display dataframe."""
    if isinstance(parsed, LedgerData):
        return pd.DataFrame(_ledger_rows(parsed))
    if isinstance(parsed, IncomeAndExpenses):
        income = pd.DataFrame([asdict(entry) for entry in parsed.income])
        expenses = pd.DataFrame(
            [
                {
                    "date": entry.date,
                    "month_label": entry.month_label,
                    **entry.categories,
                    "total": entry.total,
                }
                for entry in parsed.expenses
            ]
        )
        if income.empty:
            return expenses
        if expenses.empty:
            return income
        return income.merge(expenses, on=["date", "month_label"], how="outer").sort_values("date")
    records = list(parsed) if isinstance(parsed, (list, tuple)) else []
    if not records:
        return pd.DataFrame()
    columns = [field_info.name for field_info in fields(records[0])]
    return pd.DataFrame([asdict(record) for record in records], columns=columns)
