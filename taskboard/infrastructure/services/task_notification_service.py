"""Task notification emitters: turn domain events into notification records.

SqlNotificationEmitter writes one Notification row per affected user in a
savepoint of the request transaction. A failure there is logged and the
savepoint rolled back; the task mutation that produced the events still
commits.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.notification import NotificationCreate
from taskboard.application.dtos.task import DomainEvent
from taskboard.application.interfaces.repositories import INotificationRepository
from taskboard.domain.enums import TaskEventType
from taskboard.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_TITLES: dict[TaskEventType, str] = {
    TaskEventType.TASK_ASSIGNED: "New task assigned",
    TaskEventType.TASK_COMPLETED: "Task completed",
    TaskEventType.TASK_APPROVED: "Task approved",
    TaskEventType.SUPER_TASK_CREATED: "Task grouped",
    TaskEventType.TASK_ADDED_TO_GROUP: "Task grouped",
    TaskEventType.SUPER_TASK_COMPLETED: "Super task completed",
}


def _label(event: DomainEvent) -> str:
    task = event.task
    return f'{task.task_code} "{task.title}"' if task.task_code else f'"{task.title}"'


def _message(event: DomainEvent) -> str:
    label = _label(event)
    match event.event_type:
        case TaskEventType.TASK_ASSIGNED:
            return f"You were assigned to {label}"
        case TaskEventType.TASK_COMPLETED:
            if event.context.get("approved"):
                return f"{label} was completed and approved"
            return f"{label} was completed and is waiting for approval"
        case TaskEventType.TASK_APPROVED:
            return f"{label} was approved"
        case TaskEventType.SUPER_TASK_CREATED | TaskEventType.TASK_ADDED_TO_GROUP:
            return f"Your task was grouped into super task {label}"
        case TaskEventType.SUPER_TASK_COMPLETED:
            return f"Super task {label} completed (all its tasks are completed)"
    return label


def build_notifications(events: Sequence[DomainEvent]) -> list[NotificationCreate]:
    """One notification per (event, affected user); duplicates within an event are dropped."""
    items: list[NotificationCreate] = []
    for event in events:
        title = _TITLES.get(event.event_type, "Task update")
        message = _message(event)
        link = f"/tasks/{event.task.id}"
        for user_id in dict.fromkeys(event.affected_user_ids):
            items.append(
                NotificationCreate(
                    user_id=user_id,
                    type=event.event_type.value,
                    title=title,
                    message=message,
                    link=link,
                )
            )
    return items


class SqlNotificationEmitter:
    """INotificationEmitter that stores notifications for polling clients."""

    def __init__(self, db: AsyncSession, notification_repo: INotificationRepository) -> None:
        self.db = db
        self.notification_repo = notification_repo

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        items = build_notifications(events)
        if not items:
            return
        try:
            async with self.db.begin_nested():
                written = await self.notification_repo.create_many(items)
        except SQLAlchemyError:
            logger.exception(
                "Failed to store %d notifications for %d events",
                len(items),
                len(events),
            )
            return
        logger.debug("Stored %d notifications", written)
