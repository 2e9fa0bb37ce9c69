"""Pydantic models for creating records in database."""

from pydantic import BaseModel, Field, field_validator

from taskmind.core.config import constants
from taskmind.domain.task import TaskFrequency, TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    """Pydantic model for creating a task record."""

    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    due_date: str | None = Field(default=None, description="Due date (ISO format)")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    category: str | None = Field(default=None, description="Free-form category label")
    frequency: TaskFrequency = Field(default=TaskFrequency.ONCE, description="Recurrence frequency")
    status: TaskStatus = Field(default=TaskStatus.ACTIVE, description="Initial lifecycle status")

    @field_validator("title")
    @classmethod
    def validate_title_not_blank(cls, v: str) -> str:
        """Validate title contains something other than whitespace."""
        if not v.strip():
            msg = "Title must not be blank"
            raise ValueError(msg)
        return v.strip()


class CompletionCreate(BaseModel):
    """Pydantic model for a mark-complete request."""

    task_id: str = Field(..., description="Task to mark complete for today")
    quality: int = Field(
        default=constants.MAX_COMPLETION_QUALITY,
        ge=constants.MIN_COMPLETION_QUALITY,
        le=constants.MAX_COMPLETION_QUALITY,
        description="Self-rated quality of the completion",
    )
    time_spent: int | None = Field(default=None, ge=0, description="Minutes spent on the task")
    notes: str | None = Field(default=None, description="Free-form notes")
