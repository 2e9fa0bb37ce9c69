"""Streak endpoints."""

from fastapi import APIRouter, Depends

from taskmind.domain.create_models import CompletionCreate
from taskmind.domain.streak import TaskStreak
from taskmind.interface.dependencies import get_owner_id
from taskmind.models.service_models import CompletionResult
from taskmind.services import completion_service, streak_service


router = APIRouter(prefix="/api/streaks", tags=["streaks"])


@router.get("")
async def list_streaks(owner_id: str = Depends(get_owner_id)) -> list[TaskStreak]:
    """List the owner's streaks, most recently completed first."""
    return await streak_service.get_streaks(owner_id=owner_id)


@router.post("/mark-complete")
async def mark_complete(completion: CompletionCreate, owner_id: str = Depends(get_owner_id)) -> CompletionResult:
    """Mark a task complete for today, advancing its streak and today's summary."""
    return await completion_service.mark_complete(
        owner_id=owner_id,
        task_id=completion.task_id,
        details=completion,
    )
