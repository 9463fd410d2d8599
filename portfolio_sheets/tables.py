"""Immutable lookup tables shared by coercers, header resolution and row writers."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

FieldHints = Mapping[str, tuple[str, ...]]


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


TICKER_ALIASES: Mapping[str, str] = _frozen(
    {
        "ETHERUM": "ETH",
        "ETHERIUM": "ETH",
        "ETHEREUM": "ETH",
        "ETHER": "ETH",
        "BITCOIN": "BTC",
        "LITECOIN": "LTC",
        "SOLANA": "SOL",
        "CARDANO": "ADA",
        "RIPPLE": "XRP",
        "DOGECOIN": "DOGE",
    }
)

MONTH_NAMES: tuple[str, ...] = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)

RESERVED_KEYS: frozenset[str] = frozenset(
    {
        "__proto__",
        "constructor",
        "prototype",
        "toString",
        "valueOf",
        "toLocaleString",
        "hasOwnProperty",
        "isPrototypeOf",
        "propertyIsEnumerable",
    }
)

HEADER_KEYWORDS: Mapping[str, tuple[str, ...]] = _frozen(
    {
        "assets": ("name", "value", "amount", "balance", "asset", "account"),
        "investments": ("ticker", "symbol", "quantity", "qty", "avg", "cost"),
        "trades": ("date", "ticker", "symbol", "qty", "price", "type"),
        "subscriptions": ("name", "service", "cost", "price", "period", "active"),
        "accounts": ("institution", "bank", "account", "type", "card"),
        "net_worth": ("date", "worth", "total", "balance", "net"),
        "debt": ("name", "owed", "rate", "payment", "loan"),
    }
)

FIELD_HINTS: Mapping[str, FieldHints] = _frozen(
    {
        "assets": _frozen(
            {
                "name": ("name", "account", "asset", "item", "description", "holding", "security"),
                "type": ("type", "category", "class", "asset type", "kind"),
                "value": (
                    "value",
                    "amount",
                    "balance",
                    "current value",
                    "market value",
                    "total",
                    "market val",
                ),
                "currency": ("currency", "curr", "ccy"),
                "last_updated": ("last updated", "date", "updated", "as of"),
            }
        ),
        "investments": _frozen(
            {
                "name": ("name", "description", "investment", "security", "company"),
                "ticker": ("ticker", "symbol", "code", "stock", "instrument"),
                "quantity": ("quantity", "qty", "units", "shares", "count"),
                "avg_price": (
                    "avg price",
                    "average price",
                    "cost",
                    "avg cost",
                    "book value",
                    "acb",
                    "unit cost",
                ),
                "current_price": (
                    "current price",
                    "price",
                    "market price",
                    "market value",
                    "unit price",
                    "last price",
                ),
                "account_name": ("account", "account name", "location", "held in", "portfolio"),
                "asset_class": ("asset class", "class", "type", "category", "sector"),
                "market_value": ("market value", "value", "total value", "market val"),
            }
        ),
        "trades": _frozen(
            {
                "date": ("date", "time", "trade date", "executed"),
                "ticker": (
                    "ticker",
                    "symbol",
                    "code",
                    "asset",
                    "product",
                    "security",
                    "instrument",
                ),
                "quantity": ("quantity", "qty", "shares", "units", "volume"),
                "side": ("type", "action", "side", "transaction", "buy/sell"),
                "price": (
                    "purchase price",
                    "buy price",
                    "execution price",
                    "exec price",
                    "unit cost",
                    "cost",
                    "unit price",
                    "fill price",
                    "price",
                    "amount",
                    "rate",
                ),
                "market_price": (
                    "current price",
                    "market price",
                    "last price",
                    "current",
                    "close",
                    "live price",
                    "mark",
                ),
                "total": ("total", "value", "total value", "net amount", "settlement"),
                "fee": ("fee", "commission", "transaction fee"),
            }
        ),
        "subscriptions": _frozen(
            {
                "name": ("name", "service", "subscription", "item", "merchant", "description"),
                "cost": ("cost", "price", "amount", "monthly cost", "value", "payment"),
                "period": ("period", "frequency", "billing cycle"),
                "category": ("category", "type", "kind"),
                "active": ("active", "status"),
                "payment_method": ("payment method", "account", "card", "source"),
            }
        ),
        "accounts": _frozen(
            {
                "institution": (
                    "institution",
                    "bank",
                    "provider",
                    "financial institution",
                    "source",
                ),
                "name": ("name", "account name", "nickname", "label", "account"),
                "type": ("type", "category", "account type"),
                "payment_type": ("payment type", "method", "network", "card type"),
                "account_number": ("account number", "number", "last 4", "card number"),
                "transaction_type": ("transaction type", "class"),
                "purpose": ("purpose", "description", "usage", "merchant"),
            }
        ),
        "net_worth": _frozen(
            {
                "date": ("date", "time", "timestamp", "week ending"),
                "value": ("net worth", "total", "value", "amount", "balance", "equity"),
            }
        ),
        "debt": _frozen(
            {
                "name": (
                    "name",
                    "debt name",
                    "loan",
                    "description",
                    "type",
                    "account",
                    "student loan",
                ),
                "amount_owed": (
                    "remaining",
                    "loan remaining",
                    "debt owed",
                    "amount",
                    "balance",
                    "principal",
                    "debt",
                ),
                "interest_rate": ("interest rate", "rate", "apr", "interest"),
                "monthly_payment": ("monthly payment", "payment", "min payment", "monthly"),
            }
        ),
    }
)

# First match wins; order matters ("fund" must not beat "tfsa").
ASSET_TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("fhsa",), "FHSA"),
    (("tfsa",), "TFSA"),
    (("rrsp",), "RRSP"),
    (("crypto", "btc", "eth"), "Crypto"),
    (("fund", "savings"), "Cash"),
    (("car", "vehicle"), "Personal Property"),
    (("house", "real estate", "property", "condo"), "Real Estate"),
)

CRYPTO_TICKERS: frozenset[str] = frozenset(
    {"BTC", "ETH", "SOL", "ADA", "XRP", "DOGE", "LTC", "DOT", "USDT", "USDC"}
)

# Writer-side claim order: earlier fields claim their column first.
ROW_CLAIMS: Mapping[str, tuple[tuple[str, tuple[str, ...]], ...]] = _frozen(
    {
        "trades": (
            ("date", ("date", "time", "day")),
            ("ticker", ("ticker", "symbol", "code", "asset")),
            ("quantity", ("quantity", "qty", "units", "shares", "count", "amount")),
            ("total", ("total", "value", "net", "settlement")),
            ("price", ("price", "cost", "rate", "unitprice")),
            ("side", ("type", "action", "side", "direction", "buy/sell", "transaction")),
            ("fee", ("fee", "commission", "transaction", "charge")),
        ),
        "assets": (
            ("type", ("type", "category", "class", "asset type", "kind")),
            (
                "name",
                ("name", "account", "item", "description", "holding", "security", "asset"),
            ),
            (
                "value",
                (
                    "value",
                    "amount",
                    "balance",
                    "current value",
                    "market value",
                    "total",
                    "market val",
                ),
            ),
            ("currency", ("currency", "curr", "ccy")),
            ("last_updated", ("last updated", "date", "updated", "as of")),
        ),
        "subscriptions": (
            ("name", ("name", "service", "subscription", "item", "merchant", "description")),
            ("cost", ("cost", "price", "amount", "monthly cost", "value", "payment")),
            ("period", ("period", "frequency", "billing cycle")),
            ("category", ("category", "type", "kind")),
            ("active", ("active", "status")),
            ("payment_method", ("payment method", "account", "card", "source")),
        ),
        "accounts": (
            ("institution", ("institution", "bank", "provider", "source")),
            ("name", ("name", "account name", "nickname", "label", "account")),
            ("type", ("type", "category", "account type")),
            ("payment_type", ("payment type", "method", "network", "card type")),
            ("account_number", ("account number", "number", "last 4", "card number")),
            ("transaction_type", ("transaction type", "class")),
            ("currency", ("currency", "curr", "ccy")),
            ("purpose", ("purpose", "description", "usage", "merchant")),
        ),
    }
)


@dataclass(frozen=True, slots=True)
class LookupTables:
    """Bundle of static tables passed explicitly into parsing functions."""

    ticker_aliases: Mapping[str, str] = field(default_factory=lambda: TICKER_ALIASES)
    month_names: tuple[str, ...] = MONTH_NAMES
    reserved_keys: frozenset[str] = RESERVED_KEYS
    header_keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: HEADER_KEYWORDS
    )
    field_hints: Mapping[str, FieldHints] = field(default_factory=lambda: FIELD_HINTS)
    asset_type_keywords: tuple[tuple[tuple[str, ...], str], ...] = ASSET_TYPE_KEYWORDS
    crypto_tickers: frozenset[str] = CRYPTO_TICKERS
    row_claims: Mapping[str, tuple[tuple[str, tuple[str, ...]], ...]] = field(
        default_factory=lambda: ROW_CLAIMS
    )


DEFAULT_TABLES = LookupTables()
