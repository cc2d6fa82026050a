"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from saferm.recycle.models import SECONDS_PER_DAY, RunContext
from saferm.recycle.store import DATABASE_NAME, RecycleStore

# Fixed "now" for deterministic expiration tests (2024-06-01T00:00:00Z)
NOW = 1_717_200_000


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory for every test."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def recycle_root(tmp_path: Path) -> Path:
    """An existing, empty recycle directory."""
    root = tmp_path / "recycle"
    root.mkdir()
    return root


@pytest.fixture
def store(recycle_root: Path) -> RecycleStore:
    """RecycleStore over the temporary recycle directory."""
    return RecycleStore(recycle_root)


@pytest.fixture
def context() -> RunContext:
    """Run context with a 30-day window at the fixed NOW."""
    return RunContext(now=NOW, retention_days=30)


@pytest.fixture
def now() -> int:
    """The fixed timestamp used as the current time."""
    return NOW


@pytest.fixture
def write_database(recycle_root: Path) -> Callable[[list[str]], Path]:
    """Write raw database lines into the recycle directory."""

    def _write(lines: list[str]) -> Path:
        db = recycle_root / DATABASE_NAME
        db.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return db

    return _write


@pytest.fixture
def days_ago() -> Callable[[int], int]:
    """Timestamp a whole number of days before NOW."""

    def _days_ago(days: int) -> int:
        return NOW - days * SECONDS_PER_DAY

    return _days_ago


@pytest.fixture
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stop Rich from wrapping long temporary paths in CLI output."""
    from saferm.utils import formatting

    monkeypatch.setattr(formatting.console, "width", 400)
    monkeypatch.setattr(formatting.err_console, "width", 400)
