"""Domain models and DTOs."""

from taskmind.domain.create_models import CompletionCreate, TaskCreate
from taskmind.domain.streak import CompletionEntry, TaskStreak
from taskmind.domain.summary import DailySummary
from taskmind.domain.task import Task, TaskFrequency, TaskPriority, TaskStatus
from taskmind.domain.update_models import TaskUpdate


__all__ = [
    "CompletionCreate",
    "CompletionEntry",
    "DailySummary",
    "Task",
    "TaskCreate",
    "TaskFrequency",
    "TaskPriority",
    "TaskStatus",
    "TaskStreak",
    "TaskUpdate",
]
