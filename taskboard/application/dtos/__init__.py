"""Application DTOs: plain frozen dataclasses passed between layers."""

from taskboard.application.dtos.notification import (
    NotificationCreate,
    NotificationResult,
)
from taskboard.application.dtos.task import (
    UNSET,
    DomainEvent,
    NewTask,
    TaskCommandResult,
    TaskFilters,
    TaskRecord,
    TaskSnapshot,
    TaskUpdate,
)
from taskboard.application.dtos.user import UserResult

__all__ = [
    "UNSET",
    "DomainEvent",
    "NewTask",
    "NotificationCreate",
    "NotificationResult",
    "TaskCommandResult",
    "TaskFilters",
    "TaskRecord",
    "TaskSnapshot",
    "TaskUpdate",
    "UserResult",
]
