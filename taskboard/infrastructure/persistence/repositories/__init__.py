"""Persistence repositories: SQLAlchemy implementations of the application ports."""

from taskboard.infrastructure.persistence.repositories.assignment_repo import (
    AssignmentRepository,
)
from taskboard.infrastructure.persistence.repositories.base import BaseRepository
from taskboard.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from taskboard.infrastructure.persistence.repositories.task_counter_repo import (
    TaskCounterRepository,
)
from taskboard.infrastructure.persistence.repositories.task_repo import (
    TaskRepository,
)
from taskboard.infrastructure.persistence.repositories.user_repo import (
    UserRepository,
)

__all__ = [
    "AssignmentRepository",
    "BaseRepository",
    "NotificationRepository",
    "TaskCounterRepository",
    "TaskRepository",
    "UserRepository",
]
