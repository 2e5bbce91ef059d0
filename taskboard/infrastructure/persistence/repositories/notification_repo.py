"""Notification repository: per-user notification records."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.notification import (
    NotificationCreate,
    NotificationResult,
)
from taskboard.infrastructure.persistence.models.notification import Notification
from taskboard.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(n: Notification) -> NotificationResult:
    return NotificationResult(
        id=n.id,
        user_id=n.user_id,
        type=n.type,
        title=n.title,
        message=n.message,
        link=n.link,
        is_read=bool(n.is_read),
        created_at=n.created_at,
    )


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository. Implements INotificationRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Notification)

    async def create_many(self, items: Sequence[NotificationCreate]) -> int:
        if not items:
            return 0
        self.db.add_all(
            Notification(
                user_id=item.user_id,
                type=item.type,
                title=item.title,
                message=item.message,
                link=item.link,
            )
            for item in items
        )
        await self.db.flush()
        return len(items)

    async def list_for_user(
        self, user_id: int, limit: int = 50
    ) -> list[NotificationResult]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return [_to_result(n) for n in result.scalars().all()]

    async def count_unread(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        )
        return int(result.scalar_one())

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(is_read=True)
        )
        return result.rowcount > 0

    async def mark_all_read(self, user_id: int) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        return int(result.rowcount)
