"""Daily summary store operations."""

import logging

from taskmind.core import db_client
from taskmind.core.dates import parse_date, previous_day
from taskmind.core.errors import NotFoundError
from taskmind.core.logging import span
from taskmind.domain.summary import DailySummary


logger = logging.getLogger(__name__)

COLLECTION = "daily_summaries"


async def get_summary(*, owner_id: str, date: str) -> DailySummary | None:
    """Find the summary for (owner, date), or None if nothing was completed that day."""
    record = await db_client.get_first_record(
        collection=COLLECTION,
        filter_query=f'owner_id = "{db_client.sanitize_param(owner_id)}" && date = "{db_client.sanitize_param(date)}"',
    )
    return DailySummary.model_validate(record) if record else None


async def get_daily_summary(*, owner_id: str, date: str) -> DailySummary:
    """Get the summary for a given date.

    Raises:
        ValidationFailureError: If date is not YYYY-MM-DD
        NotFoundError: If no summary exists for that date
    """
    with span("summary_service.get_daily_summary"):
        parse_date(date)
        summary = await get_summary(owner_id=owner_id, date=date)
        if summary is None:
            msg = f"No summary found for {date}"
            raise NotFoundError(msg)
        return summary


async def record_completion(
    *,
    owner_id: str,
    task_id: str,
    today: str,
    existing: DailySummary | None,
) -> DailySummary:
    """Add a task to the owner's summary for ``today``.

    A new day's summary continues the usage streak when yesterday has a summary.
    The caller has already checked that the task is not listed for ``today``.
    """
    if existing is None:
        yesterday = await get_summary(owner_id=owner_id, date=previous_day(today))
        streak_count = yesterday.streak_count + 1 if yesterday else 1

        record = await db_client.create_record(
            collection=COLLECTION,
            data={
                "owner_id": owner_id,
                "date": today,
                "tasks_completed": 1,
                "completed_task_ids": [task_id],
                "streak_count": streak_count,
            },
        )
        logger.info("Created daily summary for %s (usage streak %d)", today, streak_count)
        return DailySummary.model_validate(record)

    record = await db_client.update_record(
        collection=COLLECTION,
        record_id=existing.id,
        data={
            "completed_task_ids": [*existing.completed_task_ids, task_id],
            "tasks_completed": existing.tasks_completed + 1,
        },
    )
    return DailySummary.model_validate(record)


async def _remove_task(summary: DailySummary, task_id: str) -> None:
    await db_client.update_record(
        collection=COLLECTION,
        record_id=summary.id,
        data={
            "completed_task_ids": [tid for tid in summary.completed_task_ids if tid != task_id],
            "tasks_completed": max(0, summary.tasks_completed - 1),
        },
    )


async def remove_task_from_date(*, owner_id: str, task_id: str, date: str) -> bool:
    """Take a task back out of one day's summary.

    Returns:
        True if the summary listed the task and was corrected
    """
    summary = await get_summary(owner_id=owner_id, date=date)
    if summary is None or task_id not in summary.completed_task_ids:
        return False

    await _remove_task(summary, task_id)
    logger.info("Removed task_id=%s from daily summary %s", task_id, date)
    return True


async def remove_task_from_all(*, owner_id: str, task_id: str) -> int:
    """Take a task out of every summary of the owner that lists it.

    Returns:
        Number of summaries corrected
    """
    records = await db_client.list_all_records(
        collection=COLLECTION,
        filter_query=f'owner_id = "{db_client.sanitize_param(owner_id)}"',
    )
    summaries = [DailySummary.model_validate(record) for record in records]

    # Collected up front so corrections do not shift the pages being read
    corrected = 0
    for summary in summaries:
        if task_id in summary.completed_task_ids:
            await _remove_task(summary, task_id)
            corrected += 1

    if corrected:
        logger.info("Removed task_id=%s from %d daily summaries", task_id, corrected)
    return corrected
