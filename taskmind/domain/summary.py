"""Daily activity summary domain model."""

from pydantic import BaseModel, Field


class DailySummary(BaseModel):
    """Tasks an owner completed on one calendar day."""

    id: str = Field(..., description="Unique summary ID from database")
    owner_id: str = Field(..., description="Owner user ID")
    date: str = Field(..., description="Calendar date (YYYY-MM-DD)")
    tasks_completed: int = Field(default=0, ge=0, description="Number of tasks completed that day")
    completed_task_ids: list[str] = Field(default_factory=list, description="IDs of tasks completed that day")
    streak_count: int = Field(default=1, ge=0, description="Consecutive days with at least one completion")
