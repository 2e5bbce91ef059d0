"""Pydantic request/response schemas for the API."""

from taskboard.schemas.health import HealthResponse, ReadinessResponse
from taskboard.schemas.notification import (
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from taskboard.schemas.task import (
    SuperTaskCreateRequest,
    SuperTaskMemberRequest,
    TaskAssigneesRequest,
    TaskChecklistRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskStatusRequest,
    TaskUpdateRequest,
)
from taskboard.schemas.user import UserCreateRequest, UserResponse, UserSummary

__all__ = [
    "HealthResponse",
    "MarkReadResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "ReadinessResponse",
    "SuperTaskCreateRequest",
    "SuperTaskMemberRequest",
    "TaskAssigneesRequest",
    "TaskChecklistRequest",
    "TaskCreateRequest",
    "TaskResponse",
    "TaskStatusRequest",
    "TaskUpdateRequest",
    "UnreadCountResponse",
    "UserCreateRequest",
    "UserResponse",
    "UserSummary",
]
