"""Update models for database operations."""

from pydantic import BaseModel, field_validator

from taskmind.domain.task import TaskFrequency, TaskPriority, TaskStatus


class TaskUpdate(BaseModel):
    """Partial update payload for a task; unset fields are left untouched."""

    title: str | None = None
    description: str | None = None
    due_date: str | None = None
    priority: TaskPriority | None = None
    category: str | None = None
    frequency: TaskFrequency | None = None
    status: TaskStatus | None = None
    is_completed: bool | None = None
    completed_at: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title_not_blank(cls, v: str | None) -> str | None:
        """Validate title contains something other than whitespace."""
        if v is not None and not v.strip():
            msg = "Title must not be blank"
            raise ValueError(msg)
        return v.strip() if v is not None else v
