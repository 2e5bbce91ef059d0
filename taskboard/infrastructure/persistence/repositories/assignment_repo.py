"""Assignment repository: ordered task/user assignment rows.

position 0 is the primary assignee (mirrored into task.assigned_to by the
lifecycle service).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.domain.exceptions import ConflictException
from taskboard.infrastructure.persistence.models.task import TaskAssignment

logger = logging.getLogger(__name__)


class AssignmentRepository:
    """Assignment repository. Implements IAssignmentRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_ids(self, task_id: int) -> list[int]:
        result = await self.db.execute(
            select(TaskAssignment.user_id)
            .where(TaskAssignment.task_id == task_id)
            .order_by(TaskAssignment.position.asc(), TaskAssignment.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_user_ids_for_tasks(
        self, task_ids: Sequence[int]
    ) -> dict[int, list[int]]:
        by_task: dict[int, list[int]] = {tid: [] for tid in task_ids}
        if not by_task:
            return by_task
        result = await self.db.execute(
            select(TaskAssignment.task_id, TaskAssignment.user_id)
            .where(TaskAssignment.task_id.in_(list(by_task)))
            .order_by(
                TaskAssignment.task_id,
                TaskAssignment.position.asc(),
                TaskAssignment.created_at.asc(),
            )
        )
        for task_id, user_id in result.all():
            by_task[task_id].append(user_id)
        return by_task

    async def add(self, task_id: int, user_ids: Sequence[int]) -> None:
        """Insert assignments for a new task.

        Raises:
            ConflictException: If a row violates a constraint (e.g. unknown user).
        """
        if not user_ids:
            return
        try:
            async with self.db.begin_nested():
                self.db.add_all(
                    TaskAssignment(task_id=task_id, user_id=uid, position=pos)
                    for pos, uid in enumerate(user_ids)
                )
                await self.db.flush()
        except IntegrityError as e:
            raise ConflictException(
                f"Could not assign users to task {task_id}",
                resource_type="task_assignment",
            ) from e

    async def replace(self, task_id: int, user_ids: Sequence[int]) -> None:
        """Delete all assignments of the task and insert the new set.

        Both steps run in one savepoint: on failure the savepoint is rolled
        back and the previous assignee set stays intact.

        Raises:
            ConflictException: If the replacement could not be written.
        """
        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    delete(TaskAssignment).where(TaskAssignment.task_id == task_id)
                )
                self.db.add_all(
                    TaskAssignment(task_id=task_id, user_id=uid, position=pos)
                    for pos, uid in enumerate(user_ids)
                )
                await self.db.flush()
        except IntegrityError as e:
            logger.warning("Assignment replace failed for task %s: %s", task_id, e)
            raise ConflictException(
                f"Could not replace assignees of task {task_id}",
                resource_type="task_assignment",
            ) from e
