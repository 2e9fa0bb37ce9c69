"""Recurring task resets.

A completed recurring task becomes pending again once its period has elapsed:

- daily: the calendar day changed since completion
- weekly: seven or more whole days passed since completion
- monthly: the calendar month changed
- yearly: the calendar year changed

Resetting happens in two phases. ``reconcile`` is pure: it decides which tasks
reset and returns the refreshed tasks plus the corrections owed to the streak
and daily-summary stores. ``apply_resets`` persists the tasks and then applies
the corrections one record at a time. Persistence is best-effort; failures are
logged and the caller still gets the refreshed tasks.
"""

import logging
from datetime import datetime, timedelta

from taskmind.core import db_client
from taskmind.core.config import constants
from taskmind.core.dates import date_string, local_date, parse_timestamp
from taskmind.core.errors import CascadeError
from taskmind.core.logging import log_with_user_context, span
from taskmind.domain.task import Task, TaskFrequency, TaskStatus
from taskmind.models.service_models import ResetCorrection
from taskmind.services import streak_service, summary_service


logger = logging.getLogger(__name__)

COLLECTION = "tasks"


def should_reset(task: Task, now: datetime) -> bool:
    """Whether a completed recurring task should revert to pending at ``now``."""
    if not task.is_completed or task.frequency == TaskFrequency.ONCE or not task.completed_at:
        return False

    completed_at = parse_timestamp(task.completed_at)

    match task.frequency:
        case TaskFrequency.DAILY:
            return local_date(completed_at) != local_date(now)
        case TaskFrequency.WEEKLY:
            days_elapsed = (parse_timestamp(now) - completed_at) // timedelta(days=1)
            return days_elapsed >= constants.WEEKLY_RESET_DAYS
        case TaskFrequency.MONTHLY:
            completed_day, today = local_date(completed_at), local_date(now)
            return (completed_day.year, completed_day.month) != (today.year, today.month)
        case TaskFrequency.YEARLY:
            return local_date(completed_at).year != local_date(now).year
        case _:
            return False


def reconcile(tasks: list[Task], now: datetime) -> tuple[list[Task], list[ResetCorrection]]:
    """Refresh recurring tasks whose period has elapsed.

    Args:
        tasks: Tasks as read from the store
        now: Reference time

    Returns:
        Tuple of (tasks in their original order with resets applied, corrections to persist)
    """
    updated_tasks = []
    corrections = []

    for task in tasks:
        if not should_reset(task, now):
            updated_tasks.append(task)
            continue

        corrections.append(
            ResetCorrection(
                owner_id=task.owner_id,
                task_id=task.id,
                completed_date=date_string(task.completed_at),
            )
        )
        updated_tasks.append(
            task.model_copy(update={"is_completed": False, "status": TaskStatus.ACTIVE, "completed_at": None})
        )

    return updated_tasks, corrections


async def _apply_correction(correction: ResetCorrection) -> None:
    """Take a reset task's old completion back out of its summary and streak."""
    try:
        await summary_service.remove_task_from_date(
            owner_id=correction.owner_id,
            task_id=correction.task_id,
            date=correction.completed_date,
        )
        await streak_service.remove_completion_date(
            owner_id=correction.owner_id,
            task_id=correction.task_id,
            completed_date=correction.completed_date,
        )
    except Exception as e:
        raise CascadeError(f"Failed to clean up reset task {correction.task_id}: {e}") from e


async def apply_resets(*, owner_id: str, corrections: list[ResetCorrection]) -> int:
    """Persist resets and cascade their corrections.

    Returns:
        Number of corrections that were applied without error
    """
    if not corrections:
        return 0

    task_ids = [correction.task_id for correction in corrections]
    try:
        await db_client.update_records(
            collection=COLLECTION,
            record_ids=task_ids,
            data={"is_completed": False, "status": TaskStatus.ACTIVE, "completed_at": None},
        )
    except Exception as e:
        log_with_user_context(logger, "error", "Error updating recurring tasks", user_id=owner_id, error=str(e))
        return 0

    applied = 0
    for correction in corrections:
        try:
            await _apply_correction(correction)
            applied += 1
        except CascadeError as e:
            log_with_user_context(
                logger,
                "warning",
                "Cascade failure while resetting task",
                user_id=owner_id,
                task_id=correction.task_id,
                error=str(e),
            )

    log_with_user_context(logger, "info", f"Reset {len(task_ids)} recurring tasks", user_id=owner_id)
    return applied


async def reset_recurring_tasks(*, owner_id: str, tasks: list[Task], now: datetime) -> list[Task]:
    """Reconcile a fetched task list and persist any resets.

    Returns:
        The reconciled tasks, whether or not persistence succeeded
    """
    with span("recurrence_service.reset_recurring_tasks"):
        updated_tasks, corrections = reconcile(tasks, now)
        await apply_resets(owner_id=owner_id, corrections=corrections)
        return updated_tasks
