"""Notification ORM model (records produced by the task notification emitter)."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IntegerIdMixin,
)


class Notification(IntegerIdMixin, CreatedAtMixin, Base):
    """Per-user notification. Table: notification."""

    __tablename__ = "notification"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (
        Index("ix_notification_user_read", "user_id", "is_read"),
        Index("ix_notification_user_created", "user_id", "created_at"),
    )
