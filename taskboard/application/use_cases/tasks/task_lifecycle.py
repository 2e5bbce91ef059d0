"""Task lifecycle: create, status changes, approval, assignment, edits, delete.

Status may move between any two values on a leaf task. Completing a task
as an admin approves it at once; completing it as anyone else leaves it
waiting for approval; leaving completed clears approval. Super task status
is never written here: a change on a member triggers the container rollup
in the same transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta
from enum import Enum
from typing import Any, TypeVar

from taskboard.application.dtos.task import (
    DomainEvent,
    NewTask,
    TaskCommandResult,
    TaskFilters,
    TaskRecord,
    TaskSnapshot,
    TaskUpdate,
)
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.repositories import (
    IAssignmentRepository,
    ITaskRepository,
    IUserRepository,
)
from taskboard.application.interfaces.services import IRoleRegistry, ITaskCodeAllocator
from taskboard.application.use_cases.tasks.super_task_operations import (
    MAX_TITLE_LENGTH,
    SuperTaskService,
)
from taskboard.application.use_cases.tasks.task_snapshots import TaskSnapshotBuilder
from taskboard.domain.entities.task import (
    approval_after_status_change,
    normalize_assignees,
    notification_recipients,
)
from taskboard.domain.enums import TaskCategory, TaskEventType, TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    ForbiddenException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from taskboard.domain.value_objects.core import (
    ChecklistDescription,
    ChecklistItem,
    Description,
)
from taskboard.shared.telemetry.tracing import traced
from taskboard.shared.utils.datetime import system_today

logger = logging.getLogger(__name__)


E = TypeVar("E", bound=Enum)


def _coerce_enum(enum_cls: type[E], value: Any, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationException(
            f"Invalid {field}: {value!r} (allowed: {allowed})", field=field
        ) from None


def _clean_title(title: str | None) -> str:
    clean = (title or "").strip()
    if not clean:
        raise ValidationException("Title is required", field="title")
    if len(clean) > MAX_TITLE_LENGTH:
        raise ValidationException(
            f"Title must not exceed {MAX_TITLE_LENGTH} characters", field="title"
        )
    return clean


def _check_dates(start_date: date | None, due_date: date | None) -> None:
    if start_date and due_date and due_date < start_date:
        raise ValidationException(
            "due_date must not be before start_date", field="due_date"
        )


class TaskLifecycleService:
    """Commands and queries on individual tasks.

    Write methods return TaskCommandResult (fresh snapshot plus domain
    events); publishing the events is the caller's job.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        assignment_repo: IAssignmentRepository,
        user_repo: IUserRepository,
        code_allocator: ITaskCodeAllocator,
        role_registry: IRoleRegistry,
        super_tasks: SuperTaskService,
        snapshots: TaskSnapshotBuilder,
        *,
        timezone: str = "America/Lima",
        default_start_offset_days: int = 7,
    ) -> None:
        self.task_repo = task_repo
        self.assignment_repo = assignment_repo
        self.user_repo = user_repo
        self.code_allocator = code_allocator
        self.roles = role_registry
        self.super_tasks = super_tasks
        self.snapshots = snapshots
        self.timezone = timezone
        self.default_start_offset_days = default_start_offset_days

    async def _lock(self, task_id: int) -> TaskRecord:
        record = await self.task_repo.get_for_update(task_id)
        if record is None:
            raise ResourceNotFoundException("task", task_id)
        return record

    async def _require_users(self, user_ids: Sequence[int]) -> dict[int, UserResult]:
        users = await self.user_repo.get_by_ids(user_ids)
        for uid in user_ids:
            if uid not in users:
                raise ResourceNotFoundException("user", uid)
        return users

    def _check_assignees_present(
        self, user_ids: Sequence[int], acting_user: UserResult, allow_unassigned: bool
    ) -> None:
        if user_ids:
            return
        if not allow_unassigned:
            raise ValidationException(
                "At least one assignee is required", field="assigned_users"
            )
        if not self.roles.is_admin(acting_user.role):
            raise ForbiddenException(
                "Only admins can leave a task unassigned", action="unassign"
            )

    async def _check_can_edit(self, record: TaskRecord, acting_user: UserResult) -> None:
        """Admins, the creator and assignees may edit a task."""
        if self.roles.is_admin(acting_user.role) or record.created_by == acting_user.id:
            return
        if acting_user.id in await self.assignment_repo.get_user_ids(record.id):
            return
        raise ForbiddenException(
            "Only admins, the creator or an assignee can edit this task",
            action="edit",
            task_id=record.id,
        )

    async def _reload(self, task_id: int) -> TaskRecord:
        record = await self.task_repo.get_by_id(task_id)
        if record is None:
            raise ResourceNotFoundException("task", task_id)
        return record

    async def _apply_status(
        self,
        record: TaskRecord,
        new_status: TaskStatus,
        acting_user: UserResult,
        *,
        approve: bool = False,
    ) -> list[DomainEvent]:
        """Write a leaf status change, then roll up the parent container."""
        if record.is_super_task:
            raise ForbiddenException(
                "Super task status is derived from its members",
                action="change_status",
                task_id=record.id,
            )
        is_admin = self.roles.is_admin(acting_user.role)
        if approve and new_status != TaskStatus.COMPLETED:
            raise InvalidStateException(
                "Only completed tasks can be approved",
                task_id=record.id,
                status=new_status.value,
            )
        approved = approval_after_status_change(new_status, is_admin)
        if new_status == record.status and approved == record.admin_approved:
            return []

        updated = await self.task_repo.set_status(record.id, new_status, approved)
        logger.info(
            "Task %s status %s -> %s by user %s (approved=%s)",
            record.id,
            record.status.value,
            new_status.value,
            acting_user.id,
            approved,
        )

        events: list[DomainEvent] = []
        if updated.parent_task_id is not None:
            events.extend(
                await self.super_tasks.recompute_status(
                    updated.parent_task_id, actor_id=acting_user.id
                )
            )
        if new_status == TaskStatus.COMPLETED:
            assignee_ids = await self.assignment_repo.get_user_ids(record.id)
            snapshot = await self.snapshots.build(updated)
            if record.status != TaskStatus.COMPLETED:
                events.insert(
                    0,
                    DomainEvent(
                        event_type=TaskEventType.TASK_COMPLETED,
                        task=snapshot,
                        affected_user_ids=notification_recipients(
                            [record.created_by, *assignee_ids], acting_user.id
                        ),
                        actor_id=acting_user.id,
                        context={"approved": approved},
                    ),
                )
            elif approved and not record.admin_approved:
                events.insert(
                    0,
                    DomainEvent(
                        event_type=TaskEventType.TASK_APPROVED,
                        task=snapshot,
                        affected_user_ids=notification_recipients(
                            assignee_ids, acting_user.id
                        ),
                        actor_id=acting_user.id,
                    ),
                )
        return events

    async def _replace_assignees(
        self,
        record: TaskRecord,
        user_ids: list[int],
        acting_user: UserResult,
        allow_unassigned: bool,
    ) -> list[DomainEvent]:
        self._check_assignees_present(user_ids, acting_user, allow_unassigned)
        await self._require_users(user_ids)
        previous = await self.assignment_repo.get_user_ids(record.id)
        if previous == user_ids:
            return []
        await self.assignment_repo.replace(record.id, user_ids)
        updated = await self.task_repo.update_fields(
            record.id, {"assigned_to": user_ids[0] if user_ids else None}
        )
        logger.info(
            "Task %s assignees %s -> %s by user %s",
            record.id,
            previous,
            user_ids,
            acting_user.id,
        )
        added = notification_recipients(
            [uid for uid in user_ids if uid not in previous], acting_user.id
        )
        if not added:
            return []
        return [
            DomainEvent(
                event_type=TaskEventType.TASK_ASSIGNED,
                task=await self.snapshots.build(updated),
                affected_user_ids=added,
                actor_id=acting_user.id,
            )
        ]

    def _default_dates(
        self, start_date: date | None, due_date: date | None
    ) -> tuple[date, date | None]:
        if start_date is None:
            if due_date is not None:
                start_date = due_date - timedelta(days=self.default_start_offset_days)
            else:
                start_date = system_today(self.timezone)
        _check_dates(start_date, due_date)
        return start_date, due_date

    @traced("task.create")
    async def create_task(
        self,
        acting_user: UserResult,
        title: str,
        *,
        description: Description | None = None,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        category: TaskCategory | str = TaskCategory.OTHER,
        assigned_users: Sequence[int] | None = None,
        assigned_to: int | None = None,
        start_date: date | None = None,
        due_date: date | None = None,
        allow_unassigned: bool = False,
    ) -> TaskCommandResult:
        """Create a leaf task with a freshly allocated code.

        The assignee list is assigned_users with assigned_to (when given)
        moved to the front. The code prefix comes from the primary
        assignee's role, or the creator's role for an unassigned task.

        Raises:
            ValidationException: Empty title, bad enum value, no assignees,
                or due date before start date.
            ForbiddenException: A non-admin asked for an unassigned task.
            ResourceNotFoundException: An assignee does not exist.
            ConflictException: The task code could not be allocated.
        """
        clean_title = _clean_title(title)
        priority_value = _coerce_enum(TaskPriority, priority, "priority")
        category_value = _coerce_enum(TaskCategory, category, "category")
        assignee_ids = normalize_assignees(assigned_users, assigned_to)
        self._check_assignees_present(assignee_ids, acting_user, allow_unassigned)
        users = await self._require_users(assignee_ids)
        start, due = self._default_dates(start_date, due_date)

        code_role = users[assignee_ids[0]].role if assignee_ids else acting_user.role
        code = await self.code_allocator.allocate_for_role(code_role)
        record = await self.task_repo.create_task(
            NewTask(
                title=clean_title,
                created_by=acting_user.id,
                priority=priority_value,
                category=category_value,
                description=description,
                task_code=code.value,
                assigned_to=assignee_ids[0] if assignee_ids else None,
                start_date=start,
                due_date=due,
            )
        )
        await self.assignment_repo.add(record.id, assignee_ids)
        logger.info(
            "Task %s (%s) created by user %s for %s",
            record.id,
            code.value,
            acting_user.id,
            assignee_ids,
        )

        snapshot = await self.snapshots.build(record)
        events = []
        recipients = notification_recipients(assignee_ids, acting_user.id)
        if recipients:
            events.append(
                DomainEvent(
                    event_type=TaskEventType.TASK_ASSIGNED,
                    task=snapshot,
                    affected_user_ids=recipients,
                    actor_id=acting_user.id,
                )
            )
        return TaskCommandResult(task=snapshot, events=events)

    @traced("task.change_status")
    async def change_status(
        self,
        task_id: int,
        acting_user: UserResult,
        status: TaskStatus | str | None = None,
        approve: bool = False,
    ) -> TaskCommandResult:
        """Set a leaf task's status; with approve, an admin also approves it.

        Any user may change status. approve without status approves the
        task as it stands.

        Raises:
            ForbiddenException: Target is a super task, or a non-admin asked
                to approve.
            InvalidStateException: approve on a task that will not be completed.
            ValidationException: Neither status nor approve given, or bad status.
        """
        if approve and not self.roles.is_admin(acting_user.role):
            raise ForbiddenException(
                "Only admins can approve tasks", action="approve", task_id=task_id
            )
        if status is None:
            if approve:
                return await self.approve(task_id, acting_user)
            raise ValidationException("status is required", field="status")
        new_status = _coerce_enum(TaskStatus, status, "status")
        record = await self._lock(task_id)
        events = await self._apply_status(record, new_status, acting_user, approve=approve)
        snapshot = await self.snapshots.build(await self._reload(task_id))
        return TaskCommandResult(task=snapshot, events=events)

    @traced("task.approve")
    async def approve(self, task_id: int, acting_user: UserResult) -> TaskCommandResult:
        """Approve a completed leaf task (admin only). Approving twice is a no-op.

        Raises:
            ForbiddenException: Non-admin caller, or target is a super task.
            InvalidStateException: Task is not completed.
        """
        if not self.roles.is_admin(acting_user.role):
            raise ForbiddenException(
                "Only admins can approve tasks", action="approve", task_id=task_id
            )
        record = await self._lock(task_id)
        if record.is_super_task:
            raise ForbiddenException(
                "Super tasks are approved when all their members are completed",
                action="approve",
                task_id=task_id,
            )
        if record.status != TaskStatus.COMPLETED:
            raise InvalidStateException(
                "Only completed tasks can be approved",
                task_id=task_id,
                status=record.status.value,
            )
        if record.admin_approved:
            return TaskCommandResult(task=await self.snapshots.build(record))

        updated = await self.task_repo.set_status(task_id, TaskStatus.COMPLETED, True)
        logger.info("Task %s approved by user %s", task_id, acting_user.id)
        snapshot = await self.snapshots.build(updated)
        recipients = notification_recipients(snapshot.assignee_ids, acting_user.id)
        events = []
        if recipients:
            events.append(
                DomainEvent(
                    event_type=TaskEventType.TASK_APPROVED,
                    task=snapshot,
                    affected_user_ids=recipients,
                    actor_id=acting_user.id,
                )
            )
        return TaskCommandResult(task=snapshot, events=events)

    @traced("task.update_assignment")
    async def update_assignment(
        self,
        task_id: int,
        acting_user: UserResult,
        user_ids: Sequence[int],
        allow_unassigned: bool = False,
    ) -> TaskCommandResult:
        """Replace the assignee set of one task (never its group co-members).

        The first id becomes the primary assignee.

        Raises:
            ConflictException: The replacement could not be written; the
                previous assignees are kept.
        """
        record = await self._lock(task_id)
        await self._check_can_edit(record, acting_user)
        events = await self._replace_assignees(
            record, normalize_assignees(user_ids), acting_user, allow_unassigned
        )
        snapshot = await self.snapshots.build(await self._reload(task_id))
        return TaskCommandResult(task=snapshot, events=events)

    @traced("task.update")
    async def update_task(
        self, task_id: int, acting_user: UserResult, changes: TaskUpdate
    ) -> TaskCommandResult:
        """Apply a partial update. Fields left UNSET are untouched.

        Status changes follow change_status rules; assignee changes follow
        update_assignment rules.
        """
        record = await self._lock(task_id)
        await self._check_can_edit(record, acting_user)
        if record.is_super_task and changes.is_set("status"):
            raise ForbiddenException(
                "Super task status is derived from its members",
                action="change_status",
                task_id=task_id,
            )

        values: dict[str, Any] = {}
        if changes.is_set("title"):
            values["title"] = _clean_title(changes.title)
        if changes.is_set("description"):
            values["description"] = changes.description
        if changes.is_set("priority"):
            values["priority"] = _coerce_enum(TaskPriority, changes.priority, "priority")
        if changes.is_set("category"):
            values["category"] = _coerce_enum(TaskCategory, changes.category, "category")
        if changes.is_set("start_date"):
            values["start_date"] = changes.start_date
        if changes.is_set("due_date"):
            values["due_date"] = changes.due_date
        _check_dates(
            values.get("start_date", record.start_date),
            values.get("due_date", record.due_date),
        )

        events: list[DomainEvent] = []
        if changes.is_set("assigned_users") or changes.is_set("assigned_to"):
            if changes.is_set("assigned_users"):
                base = list(changes.assigned_users or [])
            else:
                base = await self.assignment_repo.get_user_ids(task_id)
            primary = changes.assigned_to if changes.is_set("assigned_to") else None
            events.extend(
                await self._replace_assignees(
                    record, normalize_assignees(base, primary), acting_user, False
                )
            )
        if values:
            await self.task_repo.update_fields(task_id, values)
            logger.info(
                "Task %s updated by user %s: %s", task_id, acting_user.id, sorted(values)
            )
        if changes.is_set("status"):
            new_status = _coerce_enum(TaskStatus, changes.status, "status")
            events.extend(
                await self._apply_status(
                    await self._reload(task_id), new_status, acting_user
                )
            )
        snapshot = await self.snapshots.build(await self._reload(task_id))
        return TaskCommandResult(task=snapshot, events=events)

    @traced("task.update_checklist")
    async def update_checklist(
        self,
        task_id: int,
        acting_user: UserResult,
        items: Sequence[ChecklistItem],
    ) -> TaskCommandResult:
        """Replace the task description with a checklist."""
        record = await self._lock(task_id)
        await self._check_can_edit(record, acting_user)
        try:
            checklist = ChecklistDescription(items=tuple(items))
        except ValueError as e:
            raise ValidationException(str(e), field="items") from e
        updated = await self.task_repo.update_fields(task_id, {"description": checklist})
        logger.debug(
            "Task %s checklist %d/%d",
            task_id,
            checklist.checked_count,
            checklist.total_count,
        )
        return TaskCommandResult(task=await self.snapshots.build(updated))

    @traced("task.delete")
    async def delete_task(
        self, task_id: int, acting_user: UserResult
    ) -> list[DomainEvent]:
        """Delete a task (admin only).

        Deleting a super task detaches its members and keeps them. Deleting a
        member re-derives its former super task. Member rows are locked
        before the container row, as in every rollup.
        """
        if not self.roles.is_admin(acting_user.role):
            raise ForbiddenException(
                "Only admins can delete tasks", action="delete", task_id=task_id
            )
        current = await self.task_repo.get_by_id(task_id)
        if current is None:
            raise ResourceNotFoundException("task", task_id)
        if current.is_super_task:
            await self.task_repo.lock_children(task_id)
        record = await self._lock(task_id)
        if record.is_super_task:
            orphaned = await self.task_repo.orphan_children(task_id)
            await self.task_repo.delete_task(task_id)
            logger.info(
                "Super task %s deleted by user %s; detached members %s",
                task_id,
                acting_user.id,
                orphaned,
            )
            return []
        await self.task_repo.delete_task(task_id)
        logger.info("Task %s deleted by user %s", task_id, acting_user.id)
        if record.parent_task_id is None:
            return []
        return await self.super_tasks.recompute_status(
            record.parent_task_id, actor_id=acting_user.id
        )

    async def get_task(self, task_id: int) -> TaskSnapshot:
        record = await self.task_repo.get_by_id(task_id)
        if record is None:
            raise ResourceNotFoundException("task", task_id)
        return await self.snapshots.build(record)

    async def get_task_by_code(self, task_code: str) -> TaskSnapshot:
        record = await self.task_repo.get_by_code(task_code)
        if record is None:
            raise ResourceNotFoundException("task", task_code)
        return await self.snapshots.build(record)

    async def list_tasks(self, filters: TaskFilters | None = None) -> list[TaskSnapshot]:
        """Return top-level tasks (super tasks carry their members), newest first."""
        records = await self.task_repo.list_root_tasks(filters or TaskFilters())
        return await self.snapshots.build_many(records)
