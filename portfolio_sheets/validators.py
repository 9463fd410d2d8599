"""Shared input validators used by tab-source prompts."""

from collections.abc import Collection
from pathlib import Path

from portfolio_sheets.coercers import extract_sheet_id

CSV_EXTENSION = ".csv"
MAX_TAB_NAME_LENGTH = 100


def validate_csv_path(raw: str, registered_paths: Collection[Path] = ()) -> bool | str:
    """Validate non-empty, existing, CSV, non-duplicate file input."""
    if not (text := raw.strip()):
        return "This field is required."
    if not (path := Path(text).expanduser().resolve()).is_file():
        return "Path must be a file."
    if path.suffix.lower() != CSV_EXTENSION:
        return f"Only {CSV_EXTENSION} files are supported."
    if path in registered_paths:
        return "File already registered for this tab type."
    return True


def validate_tab_name(raw: str) -> bool | str:
    """Validate optional spreadsheet tab name input."""
    text = raw.strip()
    if len(text) > MAX_TAB_NAME_LENGTH:
        return f"Tab name must be at most {MAX_TAB_NAME_LENGTH} characters."
    if any(char in text for char in "[]*?:/\\"):
        return "Tab name cannot contain any of []*?:/\\ characters."
    return True


def validate_sheet_id(raw: str) -> bool | str:
    """Validate optional spreadsheet URL or bare spreadsheet id input."""
    if not (text := raw.strip()):
        return True
    if not extract_sheet_id(text):
        return "Expected a spreadsheet URL or id."
    return True

