"""Tests for InMemoryDBClient implementation."""

import pytest

from taskmind.core.db_client import DatabaseError, RecordNotFoundError


@pytest.mark.unit
class TestInMemoryDBClient:
    """Test suite for InMemoryDBClient."""

    async def test_create_record(self, in_memory_db):
        """Test creating a record."""
        record = await in_memory_db.create_record("tasks", {"title": "Read", "owner_id": "user-1"})

        assert record["id"] is not None
        assert record["title"] == "Read"
        assert "created" in record
        assert "updated" in record

    async def test_create_record_invalid_data(self, in_memory_db):
        """Test creating a record with invalid data raises error."""
        with pytest.raises(DatabaseError, match="Data must be a dictionary"):
            await in_memory_db.create_record("tasks", "invalid")

    async def test_get_record_not_found(self, in_memory_db):
        """Test getting a missing record raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            await in_memory_db.get_record("tasks", "nonexistent")

    async def test_update_record(self, in_memory_db):
        """Test updating a record bumps its updated timestamp."""
        created = await in_memory_db.create_record("tasks", {"title": "Old"})

        updated = await in_memory_db.update_record("tasks", created["id"], {"title": "New"})

        assert updated["title"] == "New"
        assert updated["updated"] != created["updated"]

    async def test_update_records(self, in_memory_db):
        """Test batch updates skip unknown ids and report how many changed."""
        first = await in_memory_db.create_record("tasks", {"is_completed": True})
        second = await in_memory_db.create_record("tasks", {"is_completed": True})

        count = await in_memory_db.update_records("tasks", [first["id"], second["id"], "9999"], {"is_completed": False})

        assert count == 2
        assert (await in_memory_db.get_record("tasks", first["id"]))["is_completed"] is False

    async def test_delete_record(self, in_memory_db):
        """Test deleting a record."""
        created = await in_memory_db.create_record("tasks", {"title": "Gone"})

        await in_memory_db.delete_record("tasks", created["id"])

        with pytest.raises(RecordNotFoundError):
            await in_memory_db.get_record("tasks", created["id"])

    async def test_list_records_with_filters(self, in_memory_db):
        """Test equality, inequality, boolean, and AND filters."""
        await in_memory_db.create_record("tasks", {"owner_id": "user-1", "category": "health", "is_completed": True})
        await in_memory_db.create_record("tasks", {"owner_id": "user-1", "category": "work", "is_completed": False})
        await in_memory_db.create_record("tasks", {"owner_id": "user-2", "category": "health", "is_completed": False})

        owned = await in_memory_db.list_records("tasks", filter_query='owner_id = "user-1"')
        not_health = await in_memory_db.list_records("tasks", filter_query='category != "health"')
        done = await in_memory_db.list_records("tasks", filter_query='is_completed = "true"')
        both = await in_memory_db.list_records(
            "tasks", filter_query='owner_id = "user-1" && is_completed = "false"'
        )

        assert len(owned) == 2
        assert [r["category"] for r in not_health] == ["work"]
        assert len(done) == 1
        assert [r["category"] for r in both] == ["work"]

    async def test_list_records_invalid_filter(self, in_memory_db):
        """Test filters without an operator are rejected."""
        with pytest.raises(DatabaseError, match="Invalid filter syntax"):
            await in_memory_db.list_records("tasks", filter_query="owner_id user-1")

    async def test_list_records_sort_handles_missing_values(self, in_memory_db):
        """Test descending sort with None values puts them last."""
        await in_memory_db.create_record("task_streaks", {"last_completed_date": "2025-06-01"})
        await in_memory_db.create_record("task_streaks", {"last_completed_date": None})
        await in_memory_db.create_record("task_streaks", {"last_completed_date": "2025-06-03"})

        records = await in_memory_db.list_records("task_streaks", sort="-last_completed_date")

        assert [r["last_completed_date"] for r in records] == ["2025-06-03", "2025-06-01", None]

    async def test_list_records_pagination(self, in_memory_db):
        """Test page and per_page slice results."""
        for i in range(5):
            await in_memory_db.create_record("tasks", {"title": f"Task {i}"})

        page_two = await in_memory_db.list_records("tasks", page=2, per_page=2)

        assert [r["title"] for r in page_two] == ["Task 2", "Task 3"]

    async def test_fail_on_injects_errors(self, in_memory_db):
        """Test registered failures are raised for the matching operation only."""
        in_memory_db.fail_on[("list", "tasks")] = DatabaseError("down")

        with pytest.raises(DatabaseError, match="down"):
            await in_memory_db.list_records("tasks")
        await in_memory_db.create_record("tasks", {"title": "Still works"})

    async def test_record_modifications_dont_affect_storage(self, in_memory_db):
        """Test returned records are copies."""
        created = await in_memory_db.create_record("task_streaks", {"dates_completed": ["2025-06-01"]})
        created["dates_completed"].append("2025-06-02")

        stored = await in_memory_db.get_record("task_streaks", created["id"])

        assert stored["dates_completed"] == ["2025-06-01"]
