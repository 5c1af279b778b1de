# tests/conftest.py

"""Shared pytest fixtures for the catalog tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_db_path(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the default SQLite path at a per-test temp file."""
    db_path = tmp_path / "catalog.db"
    with patch("src.config.settings.Settings.DB_PATH", db_path):
        yield db_path
