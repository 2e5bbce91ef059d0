"""DTOs for users (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserResult:
    """User read-model. role is an opaque string; see RoleRegistry for capabilities."""

    id: int
    username: str
    full_name: str
    role: str
    avatar_color: str
    created_at: datetime | None = None
