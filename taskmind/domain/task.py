"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, Field


class TaskPriority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskFrequency(StrEnum):
    """How often a task recurs after completion."""

    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    ARCHIVED = "archived"


class Task(BaseModel):
    """Task data transfer object."""

    id: str = Field(..., description="Unique task ID from database")
    owner_id: str = Field(..., description="Owner user ID")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    due_date: str | None = Field(default=None, description="Due date (ISO format)")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    category: str | None = Field(default=None, description="Free-form category label")
    frequency: TaskFrequency = Field(default=TaskFrequency.ONCE, description="Recurrence frequency")
    is_completed: bool = Field(default=False, description="Whether the task is currently completed")
    completed_at: str | None = Field(default=None, description="Completion timestamp (ISO format)")
    status: TaskStatus = Field(default=TaskStatus.ACTIVE, description="Lifecycle status")
    total_completions: int = Field(default=0, ge=0, description="Completions of a recurring task")
    last_completed_date: str | None = Field(default=None, description="Last completion date (YYYY-MM-DD)")
    created: str | None = Field(default=None, description="Creation timestamp (ISO format)")
    updated: str | None = Field(default=None, description="Last update timestamp (ISO format)")

    @property
    def is_recurring(self) -> bool:
        return self.frequency != TaskFrequency.ONCE
