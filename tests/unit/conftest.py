"""Pytest configuration and fixtures for unit tests."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from taskmind.domain.create_models import TaskCreate
from taskmind.domain.task import TaskFrequency
from taskmind.main import app
from taskmind.services import task_service
from tests.unit.mocks import InMemoryDBClient


OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches taskmind.core.db_client functions to use InMemoryDBClient."""
    monkeypatch.setattr("taskmind.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("taskmind.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("taskmind.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("taskmind.core.db_client.update_records", in_memory_db.update_records)
    monkeypatch.setattr("taskmind.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("taskmind.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("taskmind.core.db_client.get_first_record", in_memory_db.get_first_record)

    return in_memory_db


@pytest.fixture
def utc_timezone(monkeypatch):
    """Pin calendar-day comparisons to UTC."""
    monkeypatch.setattr("taskmind.core.config.settings.timezone", "UTC")


@pytest.fixture
def task_factory(patched_db, utc_timezone):
    """Factory for creating tasks through the service layer.

    Usage:
        task = await task_factory(title="Stretch", frequency=TaskFrequency.DAILY)
    """

    async def _create_task(owner_id: str = OWNER_ID, **kwargs):
        data = {"title": "Test Task", "frequency": TaskFrequency.ONCE, **kwargs}
        return await task_service.create_task(owner_id=owner_id, task=TaskCreate(**data))

    return _create_task


@pytest.fixture
def completed_task_factory(patched_db, task_factory):
    """Factory for tasks stored as completed at a given time, bypassing the streak bookkeeping."""

    async def _create_completed(completed_at: datetime, owner_id: str = OWNER_ID, **kwargs):
        task = await task_factory(owner_id=owner_id, **kwargs)
        await patched_db.update_record(
            "tasks",
            task.id,
            {
                "is_completed": True,
                "status": "completed",
                "completed_at": completed_at.astimezone(UTC).isoformat().replace("+00:00", "Z"),
            },
        )
        return await task_service.get_task(owner_id=owner_id, task_id=task.id)

    return _create_completed


@pytest.fixture
def api_client(patched_db, utc_timezone):
    """FastAPI test client backed by the in-memory database (lifespan not started)."""
    return TestClient(app, raise_server_exceptions=False)
