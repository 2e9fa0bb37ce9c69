"""Per-task streak domain models."""

from pydantic import BaseModel, Field

from taskmind.core.config import constants


class CompletionEntry(BaseModel):
    """Details recorded alongside a single day's completion."""

    date: str = Field(..., description="Completion date (YYYY-MM-DD)")
    quality: int = Field(
        default=constants.MAX_COMPLETION_QUALITY,
        ge=constants.MIN_COMPLETION_QUALITY,
        le=constants.MAX_COMPLETION_QUALITY,
        description="Self-rated quality of the completion",
    )
    time_spent: int | None = Field(default=None, ge=0, description="Minutes spent on the task")
    notes: str | None = Field(default=None, description="Free-form notes")


class TaskStreak(BaseModel):
    """Completion history and streak counters for one (owner, task) pair."""

    id: str = Field(..., description="Unique streak ID from database")
    owner_id: str = Field(..., description="Owner user ID")
    task_id: str = Field(..., description="Task this streak belongs to")
    dates_completed: list[str] = Field(default_factory=list, description="Completion dates (YYYY-MM-DD)")
    current_streak: int = Field(default=0, ge=0, description="Consecutive days ending at last_completed_date")
    longest_streak: int = Field(default=0, ge=0, description="Best-ever current_streak")
    last_completed_date: str | None = Field(default=None, description="Most recent completion date")
    completion_history: list[CompletionEntry] = Field(default_factory=list, description="Per-day completion details")
