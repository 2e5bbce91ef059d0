"""Task repository: task rows (leaves and super task containers).

Returns TaskRecord DTOs. Rows are read and written through the ORM
instances attached to the request session, so a task read after a write in
the same transaction sees the written values.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.task import NewTask, TaskFilters, TaskRecord
from taskboard.domain.enums import TaskCategory, TaskPriority, TaskStatus
from taskboard.domain.exceptions import ResourceNotFoundException
from taskboard.domain.value_objects.core import description_from_payload
from taskboard.infrastructure.persistence.models.task import Task, TaskAssignment
from taskboard.infrastructure.persistence.repositories.base import BaseRepository

# Columns update_fields may write; status and structure go through dedicated methods.
_UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "priority",
        "category",
        "start_date",
        "due_date",
        "assigned_to",
    }
)


def _to_record(t: Task) -> TaskRecord:
    """Map Task ORM to TaskRecord DTO."""
    return TaskRecord(
        id=t.id,
        task_code=t.task_code,
        title=t.title,
        description=description_from_payload(t.description),
        priority=TaskPriority(t.priority),
        category=TaskCategory(t.category),
        status=TaskStatus(t.status),
        admin_approved=bool(t.admin_approved),
        start_date=t.start_date,
        due_date=t.due_date,
        assigned_to=t.assigned_to,
        created_by=t.created_by,
        parent_task_id=t.parent_task_id,
        is_super_task=bool(t.is_super_task),
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


def _to_column(name: str, value: Any) -> Any:
    if name == "description":
        return value.to_payload() if value is not None else None
    if name in ("priority", "category"):
        return value.value if value is not None else None
    return value


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def _require(self, task_id: int, *, for_update: bool = False) -> Task:
        task = await self._get(task_id, for_update=for_update)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        return task

    async def get_by_id(self, task_id: int) -> TaskRecord | None:
        task = await self._get(task_id)
        return _to_record(task) if task else None

    async def get_by_code(self, task_code: str) -> TaskRecord | None:
        result = await self.db.execute(select(Task).where(Task.task_code == task_code))
        task = result.scalar_one_or_none()
        return _to_record(task) if task else None

    async def get_for_update(self, task_id: int) -> TaskRecord | None:
        task = await self._get(task_id, for_update=True)
        return _to_record(task) if task else None

    async def list_root_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """Return tasks without a parent, newest first."""
        stmt = select(Task).where(Task.parent_task_id.is_(None))
        if filters.assigned_to is not None:
            stmt = stmt.where(
                Task.id.in_(
                    select(TaskAssignment.task_id).where(
                        TaskAssignment.user_id == filters.assigned_to
                    )
                )
            )
        if filters.status is not None:
            stmt = stmt.where(Task.status == filters.status.value)
        if filters.priority is not None:
            stmt = stmt.where(Task.priority == filters.priority.value)
        if filters.category is not None:
            stmt = stmt.where(Task.category == filters.category.value)
        stmt = stmt.order_by(
            Task.created_at.desc(), Task.updated_at.desc(), Task.id.desc()
        )
        result = await self.db.execute(stmt)
        return [_to_record(t) for t in result.scalars().all()]

    async def list_children(self, parent_task_id: int) -> list[TaskRecord]:
        result = await self.db.execute(
            select(Task)
            .where(Task.parent_task_id == parent_task_id)
            .order_by(Task.created_at.asc(), Task.id.asc())
        )
        return [_to_record(t) for t in result.scalars().all()]

    async def lock_children(self, parent_task_id: int) -> list[int]:
        """Lock member rows in ascending id order (rows are locked after the sort)."""
        result = await self.db.execute(
            select(Task.id)
            .where(Task.parent_task_id == parent_task_id)
            .order_by(Task.id.asc())
            .with_for_update()
        )
        return list(result.scalars().all())

    async def create_task(self, data: NewTask) -> TaskRecord:
        task = Task(
            task_code=data.task_code,
            title=data.title,
            description=data.description.to_payload() if data.description else None,
            priority=data.priority.value,
            category=data.category.value,
            status=TaskStatus.PENDING.value,
            admin_approved=False,
            start_date=data.start_date,
            due_date=data.due_date,
            assigned_to=data.assigned_to,
            created_by=data.created_by,
            is_super_task=data.is_super_task,
        )
        return _to_record(await self._create(task))

    async def update_fields(self, task_id: int, values: dict[str, Any]) -> TaskRecord:
        """Update plain columns. Unknown field names raise ValueError."""
        unknown = set(values) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        task = await self._require(task_id)
        for name, value in values.items():
            setattr(task, name, _to_column(name, value))
        return _to_record(await self._save(task))

    async def set_status(
        self, task_id: int, status: TaskStatus, admin_approved: bool
    ) -> TaskRecord:
        task = await self._require(task_id)
        task.status = status.value
        task.admin_approved = admin_approved
        return _to_record(await self._save(task))

    async def set_parent(
        self, task_ids: Sequence[int], parent_task_id: int | None
    ) -> None:
        tasks = await self._get_many(list(task_ids))
        for task in tasks:
            task.parent_task_id = parent_task_id
        await self.db.flush()

    async def orphan_children(self, parent_task_id: int) -> list[int]:
        result = await self.db.execute(
            select(Task).where(Task.parent_task_id == parent_task_id)
        )
        children = list(result.scalars().all())
        for child in children:
            child.parent_task_id = None
        await self.db.flush()
        return [c.id for c in children]

    async def delete_task(self, task_id: int) -> None:
        task = await self._require(task_id)
        # Explicit so backends without enforced FK cascades stay consistent.
        await self.db.execute(
            delete(TaskAssignment).where(TaskAssignment.task_id == task_id)
        )
        await self._delete(task)
