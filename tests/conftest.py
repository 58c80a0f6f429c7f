"""Shared fixtures for minions tests.

File handling in tests:
- Use tmp_path for any data or config directory so tests are isolated.
- Point MINIONS_DATA_DIR / MINIONS_CONFIG_DIR at tmp_path before building
  settings; never touch the real ~/.minions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from minions.domain.minion import Dependency, Minion, MinionVersion
from minions.infrastructure.storage import MemoryTaskStore


def _make_minion(
    id: str,
    title: str = "",
    version: str = "0.0.0",
    depends_on: list[str] | None = None,
    parent_id: str | None = None,
    children: list[str] | None = None,
    archived: bool = False,
    deleted: bool = False,
    **fields,
) -> Minion:
    user, major, minor = version.split(".")
    return Minion(
        id=id,
        title=title or f"Minion {id}",
        version=MinionVersion(user=user, major=major, minor=minor),
        dependencies=[
            Dependency(id=dep_id, minion_id=id) for dep_id in depends_on or []
        ],
        parent_id=parent_id,
        children=children or [],
        archived=archived,
        deleted_at=datetime.now(UTC) if deleted else None,
        **fields,
    )


@pytest.fixture
def make_minion():
    """Factory fixture that creates Minion instances."""
    return _make_minion


@pytest.fixture
def memory_store():
    """Factory fixture that creates a MemoryTaskStore seeded with minions."""

    def _store(*minions: Minion) -> MemoryTaskStore:
        return MemoryTaskStore(list(minions))

    return _store


@pytest.fixture
def minions_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate config and data directories under tmp_path."""
    monkeypatch.setenv("MINIONS_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("MINIONS_DATA_DIR", str(tmp_path / "data"))
    for name in ("MINIONS_DB", "MINIONS_MAX_DEPENDENCIES", "MINIONS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
