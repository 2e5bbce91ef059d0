"""Task API: thin routes delegating to TaskLifecycleService.

Write routes publish the domain events returned by the service to the
notification emitter, in the same request transaction.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from taskboard.api.v1.dependencies import (
    get_acting_user,
    get_acting_user_for_write,
    get_notification_emitter,
    get_task_lifecycle_service,
    get_task_query_service,
)
from taskboard.application.dtos.task import TaskFilters
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.services import INotificationEmitter
from taskboard.application.use_cases.tasks import TaskLifecycleService
from taskboard.domain.enums import TaskCategory, TaskPriority, TaskStatus
from taskboard.schemas.task import (
    TaskAssigneesRequest,
    TaskChecklistRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskStatusRequest,
    TaskUpdateRequest,
    description_to_domain,
)

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    body: TaskCreateRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Create a task; the code prefix follows the primary assignee's role."""
    result = await lifecycle.create_task(
        acting_user,
        body.title,
        description=description_to_domain(body.description),
        priority=body.priority,
        category=body.category,
        assigned_users=body.assigned_users,
        assigned_to=body.assigned_to,
        start_date=body.start_date,
        due_date=body.due_date,
        allow_unassigned=body.allow_unassigned,
    )
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    _: Annotated[UserResult, Depends(get_acting_user)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_query_service)],
    assigned_to: Annotated[int | None, Query()] = None,
    status: Annotated[TaskStatus | None, Query()] = None,
    priority: Annotated[TaskPriority | None, Query()] = None,
    category: Annotated[TaskCategory | None, Query()] = None,
):
    """List top-level tasks, newest first; super tasks include their members."""
    snapshots = await lifecycle.list_tasks(
        TaskFilters(
            assigned_to=assigned_to,
            status=status,
            priority=priority,
            category=category,
        )
    )
    return [TaskResponse.from_snapshot(s) for s in snapshots]


@router.get("/by-code/{task_code}", response_model=TaskResponse)
async def get_task_by_code(
    task_code: str,
    _: Annotated[UserResult, Depends(get_acting_user)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_query_service)],
):
    """Get a task by its human-readable code (e.g. DGnov00125)."""
    return TaskResponse.from_snapshot(await lifecycle.get_task_by_code(task_code))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    _: Annotated[UserResult, Depends(get_acting_user)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_query_service)],
):
    """Get a task by id."""
    return TaskResponse.from_snapshot(await lifecycle.get_task(task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdateRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Partially update a task (admin, creator, or assignee)."""
    result = await lifecycle.update_task(task_id, acting_user, body.to_update())
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.put("/{task_id}/status", response_model=TaskResponse)
async def change_status(
    task_id: int,
    body: TaskStatusRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Change a task's status; admins may approve in the same call."""
    result = await lifecycle.change_status(
        task_id, acting_user, status=body.status, approve=body.approve
    )
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.post("/{task_id}/approve", response_model=TaskResponse)
async def approve_task(
    task_id: int,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Approve a completed task (admin only)."""
    result = await lifecycle.approve(task_id, acting_user)
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.put("/{task_id}/assignees", response_model=TaskResponse)
async def update_assignees(
    task_id: int,
    body: TaskAssigneesRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
):
    """Replace the task's assignees; the first id becomes the primary assignee."""
    result = await lifecycle.update_assignment(
        task_id,
        acting_user,
        body.user_ids,
        allow_unassigned=body.allow_unassigned,
    )
    await emitter.publish(result.events)
    return TaskResponse.from_snapshot(result.task)


@router.put("/{task_id}/checklist", response_model=TaskResponse)
async def update_checklist(
    task_id: int,
    body: TaskChecklistRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
):
    """Replace the task description with a checklist."""
    result = await lifecycle.update_checklist(
        task_id, acting_user, [item.to_domain() for item in body.items]
    )
    return TaskResponse.from_snapshot(result.task)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: int,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_task_lifecycle_service)],
    emitter: Annotated[INotificationEmitter, Depends(get_notification_emitter)],
) -> Response:
    """Delete a task (admin only). Members of a deleted super task are kept."""
    events = await lifecycle.delete_task(task_id, acting_user)
    await emitter.publish(events)
    return Response(status_code=204)
