"""Task CRUD endpoints."""

from fastapi import APIRouter, Depends, Query, status

from taskmind.domain.create_models import TaskCreate
from taskmind.domain.task import Task, TaskPriority, TaskStatus
from taskmind.domain.update_models import TaskUpdate
from taskmind.interface.dependencies import get_owner_id
from taskmind.services import deletion_service, task_service


router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("")
async def list_tasks(
    task_status: TaskStatus | None = Query(default=None, alias="status"),
    completed: bool | None = None,
    category: str | None = None,
    priority: TaskPriority | None = None,
    owner_id: str = Depends(get_owner_id),
) -> list[Task]:
    """List the owner's tasks; recurring tasks due again come back pending."""
    return await task_service.get_tasks(
        owner_id=owner_id,
        status=task_status,
        completed=completed,
        category=category,
        priority=priority,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate, owner_id: str = Depends(get_owner_id)) -> Task:
    """Create a task."""
    return await task_service.create_task(owner_id=owner_id, task=task)


@router.get("/{task_id}")
async def get_task(task_id: str, owner_id: str = Depends(get_owner_id)) -> Task:
    """Fetch a single task."""
    return await task_service.get_task(owner_id=owner_id, task_id=task_id)


@router.put("/{task_id}")
async def update_task(task_id: str, update: TaskUpdate, owner_id: str = Depends(get_owner_id)) -> Task:
    """Partially update a task."""
    return await task_service.update_task(owner_id=owner_id, task_id=task_id, update=update)


@router.delete("/{task_id}")
async def delete_task(task_id: str, owner_id: str = Depends(get_owner_id)) -> dict[str, str]:
    """Delete a task along with its streaks and daily-summary entries."""
    await deletion_service.delete_task(owner_id=owner_id, task_id=task_id)
    return {"message": "Task deleted successfully", "task_id": task_id}
