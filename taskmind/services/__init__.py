from taskmind.services import (
    completion_service,
    deletion_service,
    recurrence_service,
    streak_service,
    summary_service,
    task_service,
)


__all__ = [
    "completion_service",
    "deletion_service",
    "recurrence_service",
    "streak_service",
    "summary_service",
    "task_service",
]
