"""Persistence models: ORM entities and mixins."""

from taskboard.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IntegerIdMixin,
    TimestampMixin,
)
from taskboard.infrastructure.persistence.models.notification import Notification
from taskboard.infrastructure.persistence.models.task import (
    Task,
    TaskAssignment,
    TaskCounter,
)
from taskboard.infrastructure.persistence.models.user import User

__all__ = [
    "CreatedAtMixin",
    "IntegerIdMixin",
    "Notification",
    "Task",
    "TaskAssignment",
    "TaskCounter",
    "TimestampMixin",
    "User",
]
