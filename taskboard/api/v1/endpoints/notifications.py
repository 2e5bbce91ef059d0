"""Notification API: the acting user's inbox."""

from typing import Annotated

from fastapi import APIRouter, Depends

from taskboard.api.v1.dependencies import (
    get_acting_user,
    get_acting_user_for_write,
    get_notification_repo,
    get_notification_repo_for_write,
)
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.repositories import INotificationRepository
from taskboard.core.config import get_settings
from taskboard.domain.exceptions import ResourceNotFoundException
from taskboard.schemas.notification import (
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    acting_user: Annotated[UserResult, Depends(get_acting_user)],
    repo: Annotated[INotificationRepository, Depends(get_notification_repo)],
):
    """Latest notifications (newest first) and the unread count."""
    items = await repo.list_for_user(
        acting_user.id, limit=get_settings().notification_list_limit
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        unread_count=await repo.count_unread(acting_user.id),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    acting_user: Annotated[UserResult, Depends(get_acting_user)],
    repo: Annotated[INotificationRepository, Depends(get_notification_repo)],
):
    return UnreadCountResponse(unread_count=await repo.count_unread(acting_user.id))


@router.put("/read-all", response_model=MarkReadResponse)
async def mark_all_read(
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    repo: Annotated[INotificationRepository, Depends(get_notification_repo_for_write)],
):
    """Mark every unread notification of the acting user as read."""
    return MarkReadResponse(updated=await repo.mark_all_read(acting_user.id))


@router.put("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_read(
    notification_id: int,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    repo: Annotated[INotificationRepository, Depends(get_notification_repo_for_write)],
):
    """Mark one notification as read. Other users' notifications are not found."""
    if not await repo.mark_read(notification_id, acting_user.id):
        raise ResourceNotFoundException("notification", notification_id)
    return MarkReadResponse(updated=1)
