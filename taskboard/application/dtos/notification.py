"""DTOs for notification records."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NotificationCreate:
    """Values for one notification row."""

    user_id: int
    type: str
    title: str
    message: str
    link: str | None = None


@dataclass(frozen=True)
class NotificationResult:
    """Notification read-model."""

    id: int
    user_id: int
    type: str
    title: str
    message: str
    link: str | None
    is_read: bool
    created_at: datetime
