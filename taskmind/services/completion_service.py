"""Marking tasks complete for the day.

One completion touches three records: the task itself, its streak, and the
owner's daily summary. Whether the task was already done today is decided
once, from both the streak and the summary, before any of them is written.
The writes that follow are independent; if one fails after another succeeded,
the records stay independently advanced.
"""

import logging
from datetime import datetime

from taskmind.core.config import constants
from taskmind.core.dates import parse_date, today_string, utc_now
from taskmind.core.errors import AlreadyCompletedError
from taskmind.core.logging import log_with_user_context, span
from taskmind.domain.create_models import CompletionCreate
from taskmind.domain.streak import CompletionEntry, TaskStreak
from taskmind.domain.summary import DailySummary
from taskmind.models.service_models import CompletionResult
from taskmind.services import streak_service, summary_service, task_service


logger = logging.getLogger(__name__)


def is_completed_on(
    *,
    task_id: str,
    day: str,
    streak: TaskStreak | None,
    summary: DailySummary | None,
) -> bool:
    """Whether either record already shows the task as done on ``day``."""
    if streak is not None and day in streak.dates_completed:
        return True
    return summary is not None and task_id in summary.completed_task_ids


async def mark_complete(
    *,
    owner_id: str,
    task_id: str,
    today: str | None = None,
    now: datetime | None = None,
    details: CompletionCreate | None = None,
) -> CompletionResult:
    """Record that the owner completed a task today.

    Args:
        owner_id: Owner of the task
        task_id: Task being completed
        today: Calendar day of the completion (defaults to the day of ``now``)
        now: Completion time (defaults to the current time)
        details: Optional quality, time spent, and notes for the completion

    Returns:
        The updated task, streak, and daily summary

    Raises:
        ValidationFailureError: If task_id or today is malformed
        NotFoundError: If the task does not exist or belongs to someone else
        AlreadyCompletedError: If the task was already completed on that day
    """
    with span("completion_service.mark_complete"):
        now = now or utc_now()
        today = today or today_string(now)
        parse_date(today)

        task = await task_service.get_task(owner_id=owner_id, task_id=task_id)

        existing_streak = await streak_service.get_streak(owner_id=owner_id, task_id=task_id)
        existing_summary = await summary_service.get_summary(owner_id=owner_id, date=today)

        if is_completed_on(task_id=task_id, day=today, streak=existing_streak, summary=existing_summary):
            msg = f"Task already marked complete for {today}"
            raise AlreadyCompletedError(msg)

        entry = CompletionEntry(
            date=today,
            quality=details.quality if details else constants.MAX_COMPLETION_QUALITY,
            time_spent=details.time_spent if details else None,
            notes=details.notes if details else None,
        )

        streak = await streak_service.record_completion(
            owner_id=owner_id,
            task_id=task_id,
            today=today,
            existing=existing_streak,
            entry=entry,
        )
        summary = await summary_service.record_completion(
            owner_id=owner_id,
            task_id=task_id,
            today=today,
            existing=existing_summary,
        )
        updated_task = await task_service.record_completion(task=task, now=now, today=today)

        log_with_user_context(
            logger,
            "info",
            "Task marked complete",
            user_id=owner_id,
            task_id=task_id,
            date=today,
            current_streak=streak.current_streak,
        )
        return CompletionResult(task=updated_task, streak=streak, summary=summary)
