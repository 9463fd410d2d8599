"""Shared pytest fixtures for registry isolation and network blocking."""

import socket
import urllib.request
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_registry_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Force registry writes into per-test temporary directory."""
    registry_dir = tmp_path / "registry"
    monkeypatch.setenv("PORTFOLIO_SHEETS_REGISTRY_DIR", str(registry_dir))
    monkeypatch.delenv("PORTFOLIO_SHEETS_DEFAULT_YEAR", raising=False)


@pytest.fixture(autouse=True)
def block_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Block network access in all tests."""

    def blocked(*_args: object, **_kwargs: object) -> None:
        """Raise explicit error when any test attempts network access."""
        raise AssertionError("Network access is blocked in tests.")

    monkeypatch.setattr(urllib.request, "urlopen", blocked)
    monkeypatch.setattr(socket, "create_connection", blocked)
    monkeypatch.setattr(socket.socket, "connect", blocked)
    monkeypatch.setattr(socket.socket, "connect_ex", blocked)


GOLDEN_DIR = Path(__file__).parent / "golden"


@pytest.fixture
def golden_dir() -> Path:
    """Return directory holding golden CSV sheet exports."""
    return GOLDEN_DIR
