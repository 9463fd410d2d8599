"""Tests for TabParser and RecordParser base behaviour."""

import inspect
from collections.abc import Sequence

from portfolio_sheets.config import SyncLogs
from portfolio_sheets.tab_parsers import AssetParser, RecordParser, TabParser


class NamesOnlyParser(RecordParser):
    """Record parser returning asset names, used for base-class tests."""

    id_prefix = "names"

    @classmethod
    def name(cls) -> str:
        return "Names"

    @classmethod
    def data_type(cls) -> str:
        return "assets"

    def parse_row(self, values: Sequence[str], row_index: int) -> tuple[str, str] | None:
        if not (name := self.columns.cell(values, "name")):
            return None
        return self.record_id(row_index), name


class StopAfterBlankParser(NamesOnlyParser):
    """Names parser ending its table at two consecutive blank rows."""

    stop_after_blank_rows = 2


def test_tab_parser_is_abstract() -> None:
    """TabParser and RecordParser should be abstract."""
    assert inspect.isabstract(TabParser)
    assert inspect.isabstract(RecordParser)


def test_update_logs_ignores_missing_sink() -> None:
    """update_logs should be a no-op without a sink and append otherwise."""
    NamesOnlyParser.update_logs(None, "row 1", "ignored")
    logs = SyncLogs()
    NamesOnlyParser.update_logs(logs, "row 1", "kept")
    assert len(logs) == 1
    assert "\x1b[36mNames\x1b[0m" in logs[0]


def test_parse_returns_empty_for_fewer_than_two_rows() -> None:
    """Sheets without a data row should parse to the empty result."""
    assert NamesOnlyParser.parse([]) == ()
    assert NamesOnlyParser.parse([["Name", "Value"]]) == ()


def test_parse_uses_positional_ids_and_skips_blank_rows() -> None:
    """Ids should derive from row position and blank rows should be skipped."""
    rows = [["Title"], ["Name", "Value"], ["House", "1"], ["", ""], ["Car", "2"]]
    assert NamesOnlyParser.parse(rows) == (("names-2", "House"), ("names-4", "Car"))


def test_parse_is_idempotent() -> None:
    """Parsing the same rows twice should produce equal results."""
    rows = [["Name", "Value"], ["House", "1"], ["Car", "2"]]
    assert NamesOnlyParser.parse(rows) == NamesOnlyParser.parse([list(r) for r in rows])


def test_parse_logs_missing_columns_and_dropped_rows() -> None:
    """Unresolved fields and unusable rows should be reported to the sink."""
    logs = SyncLogs()
    NamesOnlyParser.parse([["Name", "Value"], ["", "5"]], logs=logs)
    assert any("header has no column for" in line and "currency" in line for line in logs)
    assert any("row 2" in line and "skipped row without usable data" in line for line in logs)


def test_parse_stops_after_configured_blank_run() -> None:
    """Parsers with a blank-row limit should stop at the first long enough gap."""
    rows = [["Name", "Value"], ["A", "1"], ["", ""], ["B", "2"], ["", ""], ["", ""], ["C", "3"]]
    assert [name for _, name in StopAfterBlankParser.parse(rows)] == ["A", "B"]
    assert [name for _, name in NamesOnlyParser.parse(rows)] == ["A", "B", "C"]


def test_parser_instance_resolves_columns_once_per_sheet() -> None:
    """A parser instance should close over one resolved column map."""
    parser = AssetParser(["Value", "Name"])
    assert parser.columns.index("name") == 1
    assert parser.columns.index("value") == 0
