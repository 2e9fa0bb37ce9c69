"""Pytest configuration and fixtures for integration tests."""

import pytest


@pytest.fixture(autouse=True)
async def _real_database(sqlite_db):
    """Every integration test runs against its own SQLite file."""
    return sqlite_db
