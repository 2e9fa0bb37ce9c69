"""Pytest configuration and shared fixtures."""

import logging
from collections.abc import AsyncIterator

import pytest

from taskmind.core import db_client
from taskmind.core.config import Settings


logger = logging.getLogger(__name__)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file, calendar days in UTC."""
    return Settings(
        sqlite_db_path=str(tmp_path / "taskmind-test.db"),
        logfire_token=None,
        environment="test",
        timezone="UTC",
    )


@pytest.fixture
async def sqlite_db(monkeypatch, test_settings) -> AsyncIterator[str]:
    """Initialise a fresh SQLite database and route db_client to it.

    Yields:
        Path of the database file
    """
    monkeypatch.setattr("taskmind.core.config.settings.sqlite_db_path", test_settings.sqlite_db_path)
    monkeypatch.setattr("taskmind.core.config.settings.timezone", test_settings.timezone)

    await db_client.init_db()
    logger.debug("Initialised test database at %s", test_settings.sqlite_db_path)

    yield test_settings.sqlite_db_path

    await db_client.close_connection()
