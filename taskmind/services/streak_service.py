"""Streak store operations and streak arithmetic.

A streak record exists per (owner, task) once the task has been marked complete
at least once. ``current_streak`` counts consecutive calendar days ending at
``last_completed_date``; ``longest_streak`` keeps the best run ever reached.
"""

import logging
from typing import Any

from taskmind.core import db_client
from taskmind.core.dates import previous_day
from taskmind.core.logging import span
from taskmind.domain.streak import CompletionEntry, TaskStreak


logger = logging.getLogger(__name__)

COLLECTION = "task_streaks"


def _owner_task_filter(owner_id: str, task_id: str) -> str:
    return f'owner_id = "{db_client.sanitize_param(owner_id)}" && task_id = "{db_client.sanitize_param(task_id)}"'


async def get_streak(*, owner_id: str, task_id: str) -> TaskStreak | None:
    """Find the streak for (owner, task), or None if the task was never completed."""
    record = await db_client.get_first_record(
        collection=COLLECTION,
        filter_query=_owner_task_filter(owner_id, task_id),
    )
    return TaskStreak.model_validate(record) if record else None


async def get_streaks(*, owner_id: str) -> list[TaskStreak]:
    """Get all streaks for an owner, most recently completed first."""
    with span("streak_service.get_streaks"):
        records = await db_client.list_all_records(
            collection=COLLECTION,
            filter_query=f'owner_id = "{db_client.sanitize_param(owner_id)}"',
            sort="-last_completed_date",
        )
        logger.debug("Retrieved %d streaks for owner_id=%s", len(records), owner_id)
        return [TaskStreak.model_validate(record) for record in records]


def advance_streak(streak: TaskStreak | None, *, today: str) -> dict[str, Any]:
    """Compute the streak fields after a completion on ``today``.

    A completion the day after ``last_completed_date`` extends the run; any
    longer gap starts a new run of 1.
    """
    if streak is None:
        return {
            "dates_completed": [today],
            "current_streak": 1,
            "longest_streak": 1,
            "last_completed_date": today,
        }

    if streak.last_completed_date == previous_day(today):
        current_streak = streak.current_streak + 1
    else:
        current_streak = 1

    return {
        "dates_completed": [*streak.dates_completed, today],
        "current_streak": current_streak,
        "longest_streak": max(streak.longest_streak, current_streak),
        "last_completed_date": today,
    }


async def record_completion(
    *,
    owner_id: str,
    task_id: str,
    today: str,
    existing: TaskStreak | None,
    entry: CompletionEntry | None = None,
) -> TaskStreak:
    """Upsert the streak for a completion on ``today``.

    The caller has already checked that ``today`` is not in ``dates_completed``.
    """
    data = advance_streak(existing, today=today)
    history = list(existing.completion_history) if existing else []
    history.append(entry or CompletionEntry(date=today))
    data["completion_history"] = [item.model_dump() for item in history]

    if existing is None:
        record = await db_client.create_record(
            collection=COLLECTION,
            data={"owner_id": owner_id, "task_id": task_id, **data},
        )
        logger.info("Started streak for task_id=%s owner_id=%s", task_id, owner_id)
    else:
        record = await db_client.update_record(collection=COLLECTION, record_id=existing.id, data=data)
        logger.info(
            "Advanced streak for task_id=%s to %d (longest %d)",
            task_id,
            data["current_streak"],
            data["longest_streak"],
        )

    return TaskStreak.model_validate(record)


async def remove_completion_date(*, owner_id: str, task_id: str, completed_date: str) -> bool:
    """Undo one day of a streak after its recurring task was reset.

    The date is dropped from ``dates_completed`` and ``current_streak`` goes down
    by one, never below zero. Nothing changes when the date is not recorded.

    Returns:
        True if the streak was modified
    """
    streak = await get_streak(owner_id=owner_id, task_id=task_id)
    if streak is None or completed_date not in streak.dates_completed:
        return False

    await db_client.update_record(
        collection=COLLECTION,
        record_id=streak.id,
        data={
            "dates_completed": [day for day in streak.dates_completed if day != completed_date],
            "current_streak": max(0, streak.current_streak - 1),
        },
    )
    logger.info("Removed %s from streak of task_id=%s", completed_date, task_id)
    return True


async def delete_streaks(*, owner_id: str, task_id: str) -> int:
    """Delete every streak record for (owner, task) and return how many were removed."""
    records = await db_client.list_all_records(
        collection=COLLECTION,
        filter_query=_owner_task_filter(owner_id, task_id),
    )
    for record in records:
        await db_client.delete_record(collection=COLLECTION, record_id=record["id"])

    if records:
        logger.info("Deleted %d streak(s) for task_id=%s", len(records), task_id)
    return len(records)
