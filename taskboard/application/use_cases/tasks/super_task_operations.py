"""Super task operations: group tasks, manage membership, roll up status.

A super task is a container row (is_super_task) whose status is derived from
its members. Containers never nest and never take a direct status write.
Every method runs inside the caller's transaction; rows whose status may
change are locked (get_for_update), member before container.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from taskboard.application.dtos.task import (
    DomainEvent,
    NewTask,
    TaskCommandResult,
    TaskRecord,
)
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.repositories import (
    IAssignmentRepository,
    ITaskRepository,
)
from taskboard.application.use_cases.tasks.task_snapshots import TaskSnapshotBuilder
from taskboard.domain.entities.task import (
    derive_super_task_status,
    notification_recipients,
    super_task_approval,
)
from taskboard.domain.enums import TaskCategory, TaskEventType, TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    AlreadyGroupedException,
    InvalidGroupException,
    InvalidStateException,
    NotASuperTaskException,
    ResourceNotFoundException,
    ValidationException,
)
from taskboard.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

MIN_GROUP_SIZE = 2
MAX_TITLE_LENGTH = 200


class SuperTaskService:
    """Create super tasks, add and remove members, and keep their status derived."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        assignment_repo: IAssignmentRepository,
        snapshots: TaskSnapshotBuilder,
    ) -> None:
        self.task_repo = task_repo
        self.assignment_repo = assignment_repo
        self.snapshots = snapshots

    async def _lock(self, task_id: int) -> TaskRecord:
        record = await self.task_repo.get_for_update(task_id)
        if record is None:
            raise ResourceNotFoundException("task", task_id)
        return record

    @traced("super_task.create")
    async def create_group(
        self,
        acting_user: UserResult,
        title: str,
        task_ids: Sequence[int],
    ) -> TaskCommandResult:
        """Create a super task assigned to the acting user from two or more leaf tasks.

        Raises:
            ValidationException: Empty or too long title.
            InvalidGroupException: Fewer than two distinct tasks, a member is a
                super task, or a member already belongs to a super task.
            ResourceNotFoundException: A task id does not exist.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise ValidationException("Title is required", field="title")
        if len(clean_title) > MAX_TITLE_LENGTH:
            raise ValidationException(
                f"Title must not exceed {MAX_TITLE_LENGTH} characters", field="title"
            )
        member_ids = list(dict.fromkeys(task_ids))
        if len(member_ids) < MIN_GROUP_SIZE:
            raise InvalidGroupException(
                f"A super task needs at least {MIN_GROUP_SIZE} distinct tasks"
            )

        members = [await self._lock(tid) for tid in sorted(member_ids)]
        for member in members:
            if member.is_super_task:
                raise InvalidGroupException(
                    f"Task {member.id} is a super task and cannot be nested",
                    task_id=member.id,
                )
            if member.parent_task_id is not None:
                raise AlreadyGroupedException(member.id, member.parent_task_id)

        container = await self.task_repo.create_task(
            NewTask(
                title=clean_title,
                created_by=acting_user.id,
                priority=TaskPriority.MEDIUM,
                category=TaskCategory.OTHER,
                assigned_to=acting_user.id,
                is_super_task=True,
            )
        )
        await self.assignment_repo.add(container.id, [acting_user.id])
        await self.task_repo.set_parent(member_ids, container.id)
        events = await self.recompute_status(container.id, actor_id=acting_user.id)
        logger.info(
            "Super task %s created with %d members by user %s",
            container.id,
            len(member_ids),
            acting_user.id,
        )

        member_assignees = await self.assignment_repo.get_user_ids_for_tasks(member_ids)
        snapshot = await self.snapshots.build(
            await self.task_repo.get_by_id(container.id) or container
        )
        recipients = notification_recipients(
            [uid for tid in member_ids for uid in member_assignees.get(tid, [])],
            acting_user.id,
        )
        events.insert(
            0,
            DomainEvent(
                event_type=TaskEventType.SUPER_TASK_CREATED,
                task=snapshot,
                affected_user_ids=recipients,
                actor_id=acting_user.id,
                context={"member_ids": member_ids},
            ),
        )
        return TaskCommandResult(task=snapshot, events=events)

    @traced("super_task.add_member")
    async def add_member(
        self,
        acting_user: UserResult,
        super_task_id: int,
        task_id: int,
    ) -> TaskCommandResult:
        """Add a leaf task to a super task. Re-adding a current member is a no-op.

        Raises:
            ResourceNotFoundException: Either task does not exist.
            NotASuperTaskException: The target is not a super task.
            InvalidGroupException: The task is itself a super task.
            AlreadyGroupedException: The task belongs to a different super task.
        """
        if task_id == super_task_id:
            raise InvalidGroupException(
                "A task cannot be added to itself", task_id=task_id
            )
        task = await self._lock(task_id)
        container = await self._lock(super_task_id)
        if not container.is_super_task:
            raise NotASuperTaskException(super_task_id)
        if task.is_super_task:
            raise InvalidGroupException(
                f"Task {task_id} is a super task and cannot be nested", task_id=task_id
            )
        if task.parent_task_id == super_task_id:
            return TaskCommandResult(task=await self.snapshots.build(container))
        if task.parent_task_id is not None:
            raise AlreadyGroupedException(task_id, task.parent_task_id)

        await self.task_repo.set_parent([task_id], super_task_id)
        events = await self.recompute_status(super_task_id, actor_id=acting_user.id)
        logger.info("Task %s added to super task %s", task_id, super_task_id)

        snapshot = await self.snapshots.build(
            await self.task_repo.get_by_id(super_task_id) or container
        )
        recipients = notification_recipients(
            await self.assignment_repo.get_user_ids(task_id), acting_user.id
        )
        events.insert(
            0,
            DomainEvent(
                event_type=TaskEventType.TASK_ADDED_TO_GROUP,
                task=snapshot,
                affected_user_ids=recipients,
                actor_id=acting_user.id,
                context={"task_id": task_id},
            ),
        )
        return TaskCommandResult(task=snapshot, events=events)

    @traced("super_task.remove_member")
    async def remove_member(
        self, acting_user: UserResult, task_id: int
    ) -> TaskCommandResult:
        """Detach a task from its super task; the task itself is kept.

        Returns the former super task. An emptied super task stays as a
        pending container.

        Raises:
            ResourceNotFoundException: The task does not exist.
            InvalidStateException: The task does not belong to a super task.
        """
        task = await self._lock(task_id)
        if task.parent_task_id is None:
            raise InvalidStateException(
                f"Task {task_id} is not part of a super task", task_id=task_id
            )
        super_task_id = task.parent_task_id
        await self.task_repo.set_parent([task_id], None)
        events = await self.recompute_status(super_task_id, actor_id=acting_user.id)
        logger.info("Task %s removed from super task %s", task_id, super_task_id)

        container = await self.task_repo.get_by_id(super_task_id)
        if container is None:
            raise ResourceNotFoundException("task", super_task_id)
        return TaskCommandResult(task=await self.snapshots.build(container), events=events)

    async def recompute_status(
        self, super_task_id: int, actor_id: int | None = None
    ) -> list[DomainEvent]:
        """Derive and persist a super task's status from its current members.

        The container row is locked for the rest of the transaction. Returns
        a super_task_completed event when this call completed the container.
        """
        container = await self.task_repo.get_for_update(super_task_id)
        if container is None or not container.is_super_task:
            return []
        children = await self.task_repo.list_children(super_task_id)
        status = derive_super_task_status(c.status for c in children)
        approved = super_task_approval(status)
        if status == container.status and approved == container.admin_approved:
            return []

        updated = await self.task_repo.set_status(super_task_id, status, approved)
        add_span_attributes(super_task_id=super_task_id, super_task_status=status.value)
        logger.info(
            "Super task %s status %s -> %s (%d members)",
            super_task_id,
            container.status.value,
            status.value,
            len(children),
        )
        if status != TaskStatus.COMPLETED or container.status == TaskStatus.COMPLETED:
            return []
        snapshot = await self.snapshots.build(updated)
        return [
            DomainEvent(
                event_type=TaskEventType.SUPER_TASK_COMPLETED,
                task=snapshot,
                affected_user_ids=notification_recipients(
                    snapshot.assignee_ids, actor_id
                ),
                actor_id=actor_id,
            )
        ]
