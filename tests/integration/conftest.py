"""Integration test fixtures.

Provides a fully wired AppState on a temporary SQLite database, with the
in-memory document store and reference renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tinycache.config import CacheSettings, Settings
from tinycache.state import create_app_state

if TYPE_CHECKING:
    from pathlib import Path

    from tinycache.state import AppState


@pytest.fixture()
async def app_state(tmp_path: Path) -> AppState:
    settings = Settings(
        cache=CacheSettings(backend="sqlite", db_path=str(tmp_path / "cache.db")),
        logging={"level": "WARNING", "format": "text"},
    )
    async with create_app_state(settings) as state:
        yield state
