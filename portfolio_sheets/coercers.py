"""Format-tolerant coercion of raw spreadsheet cells into typed values."""

import math
import re
import warnings
from datetime import date, datetime
from typing import Mapping

import pandas as pd

from portfolio_sheets.tables import MONTH_NAMES, RESERVED_KEYS, TICKER_ALIASES

UNKNOWN_TICKER = "UNKNOWN"
MIN_GENERIC_YEAR = 1990

_ISO_DATE = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})")
_US_DATE = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})")
_NUMERIC_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_PARENTHESIZED = re.compile(r"\s*\(.*?\)\s*")
_TICKER_SEPARATORS = re.compile(r"[-./]")
_DUNDER = re.compile(r"^__.*__$")
_GENERIC_DATE_SHAPE = re.compile(r"[A-Za-z]|\d[-/]\d")


def parse_number(value: object) -> float:
    """Parse currency-formatted cell text, returning 0.0 when nothing numeric is found."""
    if value is None:
        return 0.0
    text = str(value).strip()
    if not text:
        return 0.0
    if "," not in text and "_" not in text:
        # Plain numerals, including scientific notation such as "1.00E+05".
        try:
            number = float(text)
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return number
    if text.startswith("(") and text.endswith(")"):
        text = "-" + text[1:-1]
    text = re.sub(r"[^0-9.\-]", "", text)
    if not (match := _NUMERIC_PREFIX.match(text)):
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def _format_ymd(year: int, month: int, day: int) -> str | None:
    """Build an ISO date string from calendar components, None when invalid."""
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _parse_month_name(text: str, default_year: int, month_names: tuple[str, ...]) -> str | None:
    """Parse tokens such as 'Jan-25' or 'January 2025' to the first day of the month."""
    normalized = re.sub(r"[\s,]+", "-", text.lower())
    month_name = next((name for name in month_names if normalized.startswith(name)), None)
    if month_name is None:
        return None
    remainder = re.sub(r"[^0-9]", "", normalized.replace(month_name, "", 1))
    year = default_year
    if len(remainder) == 2:
        year = 2000 + int(remainder)
    elif len(remainder) == 4:
        year = int(remainder)
    return _format_ymd(year, month_names.index(month_name) + 1, 1)


def _parse_generic(text: str) -> str | None:
    """Fallback to pandas parsing, rejecting implausibly old results."""
    # Bare amounts such as "12" or "1,500" are never dates.
    if not _GENERIC_DATE_SHAPE.search(text):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if pd.isna(parsed) or parsed.year < MIN_GENERIC_YEAR:
        return None
    return _format_ymd(parsed.year, parsed.month, parsed.day)


def parse_date(
    value: object,
    default_year: int | None = None,
    month_names: tuple[str, ...] = MONTH_NAMES,
) -> str | None:
    """Parse a date cell into local-calendar 'YYYY-MM-DD', or None on failure."""
    if value is None:
        return None
    text = str(value).strip()
    if len(text) < 2:
        return None

    if match := _ISO_DATE.match(text):
        year, month, day = (int(part) for part in match.groups())
        if 1 <= month <= 12 and 1 <= day <= 31 and (iso := _format_ymd(year, month, day)):
            return iso

    if match := _US_DATE.match(text):
        month, day, year = (int(part) for part in match.groups())
        if 1 <= month <= 12 and 1 <= day <= 31 and (iso := _format_ymd(year, month, day)):
            return iso

    year = default_year if default_year is not None else datetime.now().year
    if iso := _parse_month_name(text, year, month_names):
        return iso

    return _parse_generic(text)


def normalize_ticker(ticker: object, aliases: Mapping[str, str] = TICKER_ALIASES) -> str:
    """Normalize a ticker symbol, mapping spelled-out names through the alias table."""
    if ticker is None:
        return UNKNOWN_TICKER
    clean = str(ticker).upper().strip()
    if "(" in clean:
        clean = _PARENTHESIZED.sub("", clean)
    parts = _TICKER_SEPARATORS.split(clean)
    if parts[0]:
        clean = parts[0]
    clean = clean.strip()
    if not re.search(r"[A-Z0-9]", clean):
        return UNKNOWN_TICKER
    if clean in aliases:
        return aliases[clean]
    for alias, symbol in aliases.items():
        if clean.startswith(alias):
            return symbol
    return clean


def is_safe_key(key: object, reserved: frozenset[str] = RESERVED_KEYS) -> bool:
    """Return whether a user-supplied name may be used as a mapping key."""
    if not isinstance(key, str) or not (text := key.strip()):
        return False
    return text not in reserved and not _DUNDER.match(text)


def extract_sheet_id(text: str) -> str:
    """Extract a spreadsheet id from a sheet URL or a bare id, '' when invalid."""
    if not isinstance(text, str):
        return ""
    clean = text.strip()
    if match := re.search(r"/spreadsheets/d/([a-zA-Z0-9\-_]+)", clean):
        return match.group(1)
    return clean if re.fullmatch(r"[a-zA-Z0-9\-_]{30,100}", clean) else ""
