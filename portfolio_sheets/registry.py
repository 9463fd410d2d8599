"""Tab-parser registration and persisted tab-source settings."""

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import yaml

if TYPE_CHECKING:
    from portfolio_sheets.tab_parsers import TabParser


@dataclass(frozen=True, slots=True)
class TabSource:
    """One registered spreadsheet tab export and the tab type it holds."""

    data_type: str
    path: str
    tab_name: str = ""
    sheet_id: str = ""

    @property
    def label(self) -> str:
        """Return short display label for registry views."""
        return self.tab_name or Path(self.path).name

    @property
    def details(self) -> str:
        """Return registry details row for a tab source."""
        details = [f"File: {Path(self.path).name}"]
        if self.tab_name:
            details.append(f"Tab: {self.tab_name}")
        if self.sheet_id:
            details.append(f"Sheet: {self.sheet_id}")
        return ", ".join(details)


class TabRegistry:
    """Singleton class for tab-parser registration and registry directory management."""

    _tab_parser_class_defs: list[type["TabParser"]] = []
    _dir_env_var_name = "PORTFOLIO_SHEETS_REGISTRY_DIR"
    _year_env_var_name = "PORTFOLIO_SHEETS_DEFAULT_YEAR"

    @classmethod
    def registry_dir(cls) -> Path:
        """Return path to persisted tab-source directory."""
        if path := os.environ.get(cls._dir_env_var_name):
            return Path(path).expanduser()
        return Path.home() / ".portfolio-sheets"

    @classmethod
    def default_year(cls) -> int | None:
        """Return pinned year for month-name dates without a year, if configured."""
        raw = os.environ.get(cls._year_env_var_name, "").strip()
        return int(raw) if raw.isdigit() else None

    @classmethod
    def register(cls, class_def: type["TabParser"]) -> type["TabParser"]:
        """Register parser class for app choices and tab-type resolution."""
        if class_def not in cls._tab_parser_class_defs:
            cls._tab_parser_class_defs.append(class_def)
        return class_def

    @classmethod
    def ls(cls) -> list[type["TabParser"]]:
        """Return registered parser classes."""
        return sorted(
            cls._tab_parser_class_defs,
            key=lambda class_def: class_def.name().casefold(),
        )

    @classmethod
    def get(cls, data_type: str) -> type["TabParser"]:
        """Return parser class registered for a tab type."""
        for class_def in cls._tab_parser_class_defs:
            if class_def.data_type() == data_type:
                return class_def
        raise ValueError(f"Unknown tab type: {data_type}")

    @classmethod
    def unregister(cls, entry_id: str) -> None:
        """Delete persisted entry by ID."""
        entry_path = cls.registry_dir() / f"{entry_id}.yaml"
        entry_path.unlink()

    @classmethod
    def deserialize_all(cls, data_type: str | None = None) -> list[tuple[str, TabSource]]:
        """Read all registry entries in registration order."""
        registry_dir = cls.registry_dir()
        if not registry_dir.is_dir():
            return []
        paths = sorted(registry_dir.glob("*.yaml"), key=lambda x: x.stat().st_mtime_ns)
        entries = [(path.stem, cls.deserialize(path.stem)) for path in paths]
        return [
            (entry_id, source)
            for entry_id, source in entries
            if data_type is None or source.data_type == data_type
        ]

    @classmethod
    def deserialize(cls, entry_id: str) -> TabSource:
        """Instantiate tab source from persisted entry payload."""
        entry_path = cls.registry_dir() / f"{entry_id}.yaml"
        entry = yaml.safe_load(entry_path.read_text(encoding="utf-8"))
        if not isinstance(entry, dict):
            raise ValueError(f"Malformed registry entry: {entry_id}")
        cls.get(entry["data_type"])
        return TabSource(**entry)

    @classmethod
    def serialize(cls, source: TabSource) -> str:
        """Persist tab source under generated registry id."""
        cls.get(source.data_type)
        entry_id = f"{uuid4().int % 1_000_000_000:09d}"
        registry_dir_mode = 0o700
        private_file_mode = 0o600
        entry_path = cls.registry_dir() / f"{entry_id}.yaml"
        registry_path = entry_path.parent
        registry_path.mkdir(parents=True, exist_ok=True, mode=registry_dir_mode)
        registry_path.chmod(registry_dir_mode)
        fd = os.open(entry_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, private_file_mode)
        with os.fdopen(fd, "w", encoding="utf-8") as stream:
            stream.write(yaml.safe_dump(asdict(source), sort_keys=False))
        entry_path.chmod(private_file_mode)
        return entry_id
