"""Infrastructure services: notification emitters."""

from taskboard.infrastructure.services.task_notification_service import (
    SqlNotificationEmitter,
    build_notifications,
)

__all__ = [
    "SqlNotificationEmitter",
    "build_notifications",
]
