"""Super task API: grouping routes delegating to SuperTaskService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from taskboard.api.v1.dependencies import (
    get_acting_user_for_write,
    get_notification_emitter,
    get_super_task_service,
)
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.services import INotificationEmitter
from taskboard.application.use_cases.tasks import SuperTaskService
from taskboard.schemas.task import (
    SuperTaskCreateRequest,
    SuperTaskMemberRequest,
    TaskResponse,
)

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=201)
async def create_super_task(
    body: SuperTaskCreateRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    super_tasks: Annotated[SuperTaskService, Depends(get_super_task_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Group two or more tasks into a new super task assigned to the caller."""
    result = await super_tasks.create_group(acting_user, body.title, body.task_ids)
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.post("/{super_task_id}/members", response_model=TaskResponse)
async def add_member(
    super_task_id: int,
    body: SuperTaskMemberRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    super_tasks: Annotated[SuperTaskService, Depends(get_super_task_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Add a task to a super task (no-op when it is already a member)."""
    result = await super_tasks.add_member(acting_user, super_task_id, body.task_id)
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.delete("/members/{task_id}", status_code=204)
async def remove_member(
    task_id: int,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    super_tasks: Annotated[SuperTaskService, Depends(get_super_task_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
) -> Response:
    """Detach a task from its super task; the task is kept."""
    result = await super_tasks.remove_member(acting_user, task_id)
    await emitter.publish(result.events)
    return Response(status_code=204)
