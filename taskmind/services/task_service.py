"""Task service for CRUD operations.

Listing tasks is not read-only: the fetched set goes through the recurrence
resetter so that recurring tasks whose period has elapsed come back pending.
"""

import logging
from datetime import datetime
from typing import Any

from taskmind.core import db_client
from taskmind.core.dates import to_iso, utc_now
from taskmind.core.errors import NotFoundError, ValidationFailureError
from taskmind.core.logging import span
from taskmind.domain.create_models import TaskCreate
from taskmind.domain.task import Task, TaskFrequency, TaskPriority, TaskStatus
from taskmind.domain.update_models import TaskUpdate
from taskmind.services import recurrence_service


logger = logging.getLogger(__name__)

COLLECTION = "tasks"

# Fields an update may explicitly clear
_NULLABLE_FIELDS = {"description", "due_date", "category", "completed_at"}


def validate_task_id(task_id: str) -> None:
    """Reject identifiers the task store could never have issued.

    Raises:
        ValidationFailureError: If task_id is not a positive integer string
    """
    if not isinstance(task_id, str) or not task_id.isdigit():
        msg = f"Invalid task ID: {task_id!r}"
        raise ValidationFailureError(msg)


async def create_task(*, owner_id: str, task: TaskCreate) -> Task:
    """Create a new task for an owner.

    Returns:
        Created task, pending and with zero completions
    """
    with span("task_service.create_task"):
        data: dict[str, Any] = {
            **task.model_dump(exclude_none=True),
            "owner_id": owner_id,
            "is_completed": False,
            "total_completions": 0,
        }
        record = await db_client.create_record(collection=COLLECTION, data=data)
        logger.info("Created task '%s' (%s) for owner_id=%s", task.title, task.frequency, owner_id)
        return Task.model_validate(record)


async def get_task(*, owner_id: str, task_id: str) -> Task:
    """Get a task owned by owner_id.

    Raises:
        ValidationFailureError: If task_id is malformed
        NotFoundError: If the task does not exist or belongs to someone else
    """
    validate_task_id(task_id)
    try:
        record = await db_client.get_record(collection=COLLECTION, record_id=task_id)
    except db_client.RecordNotFoundError as e:
        raise NotFoundError("Task not found") from e

    if record.get("owner_id") != owner_id:
        raise NotFoundError("Task not found")
    return Task.model_validate(record)


async def get_tasks(
    *,
    owner_id: str,
    status: TaskStatus | None = None,
    completed: bool | None = None,
    category: str | None = None,
    priority: TaskPriority | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """Get an owner's tasks, newest first, with recurring tasks refreshed.

    Args:
        owner_id: Owner whose tasks to list
        status: Filter by lifecycle status
        completed: Filter by completion flag (evaluated before any reset)
        category: Filter by category
        priority: Filter by priority
        now: Reference time for recurrence resets (defaults to the current time)

    Returns:
        Tasks matching filters, with elapsed recurring tasks shown as pending
    """
    with span("task_service.get_tasks"):
        filters = [f'owner_id = "{db_client.sanitize_param(owner_id)}"']

        if status:
            filters.append(f'status = "{db_client.sanitize_param(status)}"')

        if completed is not None:
            filters.append(f'is_completed = "{"true" if completed else "false"}"')

        if category:
            filters.append(f'category = "{db_client.sanitize_param(category)}"')

        if priority:
            filters.append(f'priority = "{db_client.sanitize_param(priority)}"')

        filter_query = " && ".join(filters)

        records = await db_client.list_all_records(collection=COLLECTION, filter_query=filter_query, sort="-created")
        logger.debug("Retrieved %d tasks with filters: %s", len(records), filter_query)

        tasks = [Task.model_validate(record) for record in records]
        return await recurrence_service.reset_recurring_tasks(owner_id=owner_id, tasks=tasks, now=now or utc_now())


async def update_task(*, owner_id: str, task_id: str, update: TaskUpdate, now: datetime | None = None) -> Task:
    """Apply a partial update to a task.

    Completing through an update stamps ``completed_at`` when the caller did not
    supply one; un-completing clears it.

    Raises:
        ValidationFailureError: If task_id is malformed
        NotFoundError: If the task does not exist or belongs to someone else
    """
    with span("task_service.update_task"):
        task = await get_task(owner_id=owner_id, task_id=task_id)

        data = {
            key: value
            for key, value in update.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE_FIELDS
        }
        if not data:
            return task

        if data.get("is_completed") is False:
            data["completed_at"] = None
        elif data.get("is_completed", task.is_completed) and not data.get("completed_at", task.completed_at):
            data["completed_at"] = to_iso(now or utc_now())

        record = await db_client.update_record(collection=COLLECTION, record_id=task_id, data=data)
        logger.info("Updated task_id=%s fields=%s", task_id, sorted(data))
        return Task.model_validate(record)


async def record_completion(*, task: Task, now: datetime, today: str) -> Task:
    """Mark a task completed at ``now``; recurring tasks also count the completion."""
    data: dict[str, Any] = {
        "is_completed": True,
        "status": TaskStatus.COMPLETED,
        "completed_at": to_iso(now),
    }
    if task.frequency != TaskFrequency.ONCE:
        data["total_completions"] = task.total_completions + 1
        data["last_completed_date"] = today

    record = await db_client.update_record(collection=COLLECTION, record_id=task.id, data=data)
    return Task.model_validate(record)


async def delete_task_record(*, owner_id: str, task_id: str) -> Task:
    """Delete the task record itself, without touching dependent records.

    Raises:
        ValidationFailureError: If task_id is malformed
        NotFoundError: If the task does not exist or belongs to someone else
    """
    task = await get_task(owner_id=owner_id, task_id=task_id)
    try:
        await db_client.delete_record(collection=COLLECTION, record_id=task_id)
    except db_client.RecordNotFoundError as e:
        raise NotFoundError("Task not found") from e
    logger.info("Deleted task_id=%s for owner_id=%s", task_id, owner_id)
    return task
