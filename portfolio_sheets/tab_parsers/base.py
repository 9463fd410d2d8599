"""Abstract base classes for all tab parsers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar

from portfolio_sheets.config import LogChange, SyncLogs
from portfolio_sheets.headers import ABSENT, ColumnMap, find_header_row
from portfolio_sheets.tables import DEFAULT_TABLES, LookupTables
from portfolio_sheets.utils import is_blank, normalize_rows


class TabParser(ABC):
    """Abstract base class for all tab parsers."""

    @classmethod
    @abstractmethod
    def name(cls) -> str:
        """Return parser name shown in app choices and log lines."""

    @classmethod
    @abstractmethod
    def data_type(cls) -> str:
        """Return tab type key used by the registry and lookup tables."""

    @classmethod
    @abstractmethod
    def empty(cls) -> Any:
        """Return the result produced for a tab without usable rows."""

    @classmethod
    @abstractmethod
    def parse(
        cls,
        rows: Sequence[Sequence[str]],
        logs: SyncLogs | None = None,
        tables: LookupTables = DEFAULT_TABLES,
        default_year: int | None = None,
    ) -> Any:
        """Parse one tab worth of raw rows."""

    @classmethod
    def update_logs(
        cls,
        logs: SyncLogs | None,
        anchor: str,
        action: str,
        changes: Sequence[LogChange] = (),
    ) -> None:
        """Record one diagnostic line when a sink is provided."""
        if logs is not None:
            logs.add(cls.name(), anchor, action, changes)


class RecordParser(TabParser):
    """Column-mapped parser producing one record per data row.

    An instance is built once per sheet and closes over the resolved column map;
    ``parse_row`` is then called for every row below the header.
    """

    id_prefix: ClassVar[str] = "row"
    stop_after_blank_rows: ClassVar[int] = 0

    def __init__(
        self,
        headers: Sequence[str],
        tables: LookupTables = DEFAULT_TABLES,
        default_year: int | None = None,
    ) -> None:
        """Resolve this parser's field hints against one header row."""
        self.tables = tables
        self.default_year = default_year
        self.columns = ColumnMap.resolve(headers, tables.field_hints[self.data_type()])

    @classmethod
    def empty(cls) -> tuple:
        return ()

    @abstractmethod
    def parse_row(self, values: Sequence[str], row_index: int) -> Any | None:
        """Parse one data row, returning None when it carries nothing usable."""

    def record_id(self, row_index: int) -> str:
        """Return a positional identity key for a record."""
        return f"{self.id_prefix}-{row_index}"

    @classmethod
    def parse(
        cls,
        rows: Sequence[Sequence[str]],
        logs: SyncLogs | None = None,
        tables: LookupTables = DEFAULT_TABLES,
        default_year: int | None = None,
    ) -> tuple:
        """Locate the header, build the parser and collect one record per usable row."""
        grid = normalize_rows(rows)
        if len(grid) < 2:
            return cls.empty()
        header_index = find_header_row(grid, tables.header_keywords[cls.data_type()])
        if header_index == ABSENT:
            return cls.empty()

        parser = cls(grid[header_index], tables, default_year)
        if missing := [
            name for name in tables.field_hints[cls.data_type()] if not parser.columns.has(name)
        ]:
            cls.update_logs(
                logs,
                f"row {header_index + 1}",
                f"header has no column for {', '.join(missing)}",
            )

        records = []
        blank_run = 0
        for row_index in range(header_index + 1, len(grid)):
            values = grid[row_index]
            if is_blank(values):
                blank_run += 1
                if cls.stop_after_blank_rows and blank_run >= cls.stop_after_blank_rows:
                    break
                continue
            blank_run = 0
            if (record := parser.parse_row(values, row_index)) is None:
                cls.update_logs(logs, f"row {row_index + 1}", "skipped row without usable data")
                continue
            records.append(record)
        return tuple(records)
