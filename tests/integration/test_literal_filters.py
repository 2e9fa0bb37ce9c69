"""Owner ids and categories that look like numbers, booleans, or filter syntax."""

from datetime import UTC, datetime

import pytest

from taskmind.core import db_client
from taskmind.domain.create_models import TaskCreate
from taskmind.domain.task import TaskFrequency
from taskmind.services import completion_service, deletion_service, streak_service, task_service


@pytest.mark.integration
@pytest.mark.parametrize("owner_id", ["007", "true", "42"])
class TestLiteralOwnerIds:
    """Owner ids are matched as text against the TEXT owner_id column."""

    async def test_owner_lists_own_tasks(self, owner_id):
        """Test a numeric- or boolean-looking owner sees their tasks."""
        task = await task_service.create_task(owner_id=owner_id, task=TaskCreate(title="Floss"))

        tasks = await task_service.get_tasks(owner_id=owner_id)

        assert [t.id for t in tasks] == [task.id]

    async def test_consecutive_completions_extend_streak(self, owner_id):
        """Test the second day's completion finds and advances the existing streak."""
        task = await task_service.create_task(
            owner_id=owner_id,
            task=TaskCreate(title="Floss", frequency=TaskFrequency.DAILY),
        )
        await completion_service.mark_complete(
            owner_id=owner_id, task_id=task.id, now=datetime(2025, 6, 1, 8, 0, tzinfo=UTC)
        )

        result = await completion_service.mark_complete(
            owner_id=owner_id, task_id=task.id, now=datetime(2025, 6, 2, 8, 0, tzinfo=UTC)
        )

        assert result.streak.current_streak == 2
        assert result.streak.dates_completed == ["2025-06-01", "2025-06-02"]
        assert len(await streak_service.get_streaks(owner_id=owner_id)) == 1

    async def test_delete_cascades(self, owner_id):
        """Test deleting a completed task removes its streak and summary entry."""
        task = await task_service.create_task(owner_id=owner_id, task=TaskCreate(title="Floss"))
        await completion_service.mark_complete(
            owner_id=owner_id, task_id=task.id, now=datetime(2025, 6, 1, 8, 0, tzinfo=UTC)
        )

        result = await deletion_service.delete_task(owner_id=owner_id, task_id=task.id)

        assert result.streaks_deleted == 1
        assert result.summaries_updated == 1
        assert await streak_service.get_streak(owner_id=owner_id, task_id=task.id) is None


@pytest.mark.integration
class TestLiteralCategories:
    """Category filters match the stored text exactly."""

    @pytest.mark.parametrize("category", ["01", "false", "Mom's errands", 'a && b = "c"', "50%_off"])
    async def test_filter_by_category(self, category):
        """Test awkward categories neither fail nor match other categories."""
        match = await task_service.create_task(owner_id="user-1", task=TaskCreate(title="Match", category=category))
        await task_service.create_task(owner_id="user-1", task=TaskCreate(title="Other", category="1"))

        tasks = await task_service.get_tasks(owner_id="user-1", category=category)

        assert [t.id for t in tasks] == [match.id]


@pytest.mark.integration
async def test_list_all_records_reads_every_page(monkeypatch):
    """Test list_all_records keeps paging until a short page."""
    monkeypatch.setattr("taskmind.core.config.constants.DEFAULT_PER_PAGE_LIMIT", 2)
    for i in range(5):
        await db_client.create_record(collection="tasks", data={"owner_id": "user-1", "title": f"Task {i}"})
    await db_client.create_record(collection="tasks", data={"owner_id": "user-2", "title": "Elsewhere"})

    records = await db_client.list_all_records(collection="tasks", filter_query='owner_id = "user-1"', sort="created")

    assert [r["title"] for r in records] == [f"Task {i}" for i in range(5)]
