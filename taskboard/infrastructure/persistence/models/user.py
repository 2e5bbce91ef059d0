"""User ORM model. Role is a free-form string (custom roles allowed)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import (
    IntegerIdMixin,
    TimestampMixin,
)


class User(IntegerIdMixin, TimestampMixin, Base):
    """User model. Table: app_user. Unique username."""

    __tablename__ = "app_user"

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    avatar_color: Mapped[str] = mapped_column(
        String(16), nullable=False, default="#6366f1", server_default="#6366f1"
    )
