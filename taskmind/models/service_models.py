"""Pydantic models for service layer return types.

These models provide type safety at service boundaries, converting database
dictionaries into typed objects with validation.
"""

from pydantic import BaseModel

from taskmind.domain.streak import TaskStreak
from taskmind.domain.summary import DailySummary
from taskmind.domain.task import Task


class ResetCorrection(BaseModel):
    """Streak and summary correction owed by a recurring task that was reset."""

    owner_id: str
    task_id: str
    completed_date: str


class CompletionResult(BaseModel):
    """Records advanced by marking a task complete."""

    task: Task
    streak: TaskStreak
    summary: DailySummary


class TaskDeletionResult(BaseModel):
    """Outcome of deleting a task and cleaning up its dependent records."""

    task_id: str
    streaks_deleted: int
    summaries_updated: int
    cascade_errors: int = 0
