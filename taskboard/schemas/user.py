"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.domain.value_objects.core import Role


class UserCreateRequest(BaseModel):
    """Request body for creating a user. role is free-form (custom roles allowed)."""

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_.-]+$")
    full_name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., min_length=1, max_length=50)
    avatar_color: str = Field(default="#6366f1", pattern=r"^#[0-9a-fA-F]{6}$")

    @field_validator("role")
    @classmethod
    def _normalize_role(cls, v: str) -> str:
        return Role(v).value


class UserSummary(BaseModel):
    """User as embedded in task responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: str
    role: str
    avatar_color: str


class UserResponse(UserSummary):
    """User response."""

    is_admin: bool = False
    created_at: datetime | None = None
