"""Task deletion with cleanup of dependent records.

The task record must be deleted for the operation to succeed. Its streaks and
daily-summary entries are then cleaned up by calling each store in turn;
failures there are logged and do not fail the deletion.
"""

import logging

from taskmind.core.errors import CascadeError
from taskmind.core.logging import log_with_user_context, span
from taskmind.models.service_models import TaskDeletionResult
from taskmind.services import streak_service, summary_service, task_service


logger = logging.getLogger(__name__)


async def _cleanup_streaks(*, owner_id: str, task_id: str) -> int:
    try:
        return await streak_service.delete_streaks(owner_id=owner_id, task_id=task_id)
    except Exception as e:
        raise CascadeError(f"Failed to delete streaks for task {task_id}: {e}") from e


async def _cleanup_summaries(*, owner_id: str, task_id: str) -> int:
    try:
        return await summary_service.remove_task_from_all(owner_id=owner_id, task_id=task_id)
    except Exception as e:
        raise CascadeError(f"Failed to update daily summaries for task {task_id}: {e}") from e


async def delete_task(*, owner_id: str, task_id: str) -> TaskDeletionResult:
    """Delete a task, its streaks, and its entries in the owner's daily summaries.

    Raises:
        ValidationFailureError: If task_id is malformed
        NotFoundError: If the task does not exist or belongs to someone else
    """
    with span("deletion_service.delete_task"):
        await task_service.delete_task_record(owner_id=owner_id, task_id=task_id)

        result = TaskDeletionResult(task_id=task_id, streaks_deleted=0, summaries_updated=0)

        try:
            result.streaks_deleted = await _cleanup_streaks(owner_id=owner_id, task_id=task_id)
        except CascadeError as e:
            result.cascade_errors += 1
            log_with_user_context(logger, "warning", "Cleanup error (non-critical)", user_id=owner_id, error=str(e))

        try:
            result.summaries_updated = await _cleanup_summaries(owner_id=owner_id, task_id=task_id)
        except CascadeError as e:
            result.cascade_errors += 1
            log_with_user_context(logger, "warning", "Cleanup error (non-critical)", user_id=owner_id, error=str(e))

        return result
