"""Tests for tab-source prompt validators."""

from pathlib import Path

import pytest

from portfolio_sheets.validators import validate_csv_path, validate_sheet_id, validate_tab_name


def test_validate_csv_path_accepts_existing_csv(tmp_path: Path) -> None:
    """An existing, unregistered CSV file should validate."""
    path = tmp_path / "trades.CSV"
    path.write_text("Date,Ticker\n", encoding="utf-8")
    assert validate_csv_path(f"  {path}  ") is True


@pytest.mark.parametrize("raw", ["", "   "])
def test_validate_csv_path_requires_value(raw: str) -> None:
    """Blank input should be rejected."""
    assert validate_csv_path(raw) == "This field is required."


def test_validate_csv_path_rejects_missing_and_directories(tmp_path: Path) -> None:
    """Only existing files are accepted."""
    assert validate_csv_path(str(tmp_path / "missing.csv")) == "Path must be a file."
    assert validate_csv_path(str(tmp_path)) == "Path must be a file."


def test_validate_csv_path_rejects_other_extensions(tmp_path: Path) -> None:
    """Non-CSV exports should be rejected."""
    path = tmp_path / "trades.xlsx"
    path.write_text("x", encoding="utf-8")
    assert validate_csv_path(str(path)) == "Only .csv files are supported."


def test_validate_csv_path_rejects_registered_duplicates(tmp_path: Path) -> None:
    """A file already registered for the tab type should be rejected."""
    path = tmp_path / "trades.csv"
    path.write_text("x", encoding="utf-8")
    result = validate_csv_path(str(path), {path.resolve()})
    assert result == "File already registered for this tab type."


@pytest.mark.parametrize("raw", ["", "Trades", " Income & Expenses ", "x" * 100])
def test_validate_tab_name_accepts_sheet_names(raw: str) -> None:
    """Ordinary tab names, including blank, should validate."""
    assert validate_tab_name(raw) is True


def test_validate_tab_name_rejects_long_names() -> None:
    """Tab names are capped in length."""
    assert validate_tab_name("x" * 101) == "Tab name must be at most 100 characters."


@pytest.mark.parametrize("raw", ["Q1/Q2", "Debt?", "[Draft]", "a:b", "a*b", "a\\b"])
def test_validate_tab_name_rejects_forbidden_characters(raw: str) -> None:
    """Characters spreadsheets forbid in tab names should be rejected."""
    assert validate_tab_name(raw) == "Tab name cannot contain any of []*?:/\\ characters."


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgvE2upms",
        "https://docs.google.com/spreadsheets/d/1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgvE2upms/edit",
    ],
)
def test_validate_sheet_id_accepts_urls_and_ids(raw: str) -> None:
    """Blank input, bare ids and sheet URLs should validate."""
    assert validate_sheet_id(raw) is True


@pytest.mark.parametrize("raw", ["short", "https://example.com/doc", "not an id at all, really!"])
def test_validate_sheet_id_rejects_other_text(raw: str) -> None:
    """Text without a recognisable spreadsheet id should be rejected."""
    assert validate_sheet_id(raw) == "Expected a spreadsheet URL or id."
