"""DTOs for tasks, super tasks, and domain events (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from taskboard.application.dtos.user import UserResult
from taskboard.domain.enums import (
    TaskCategory,
    TaskEventType,
    TaskPriority,
    TaskStatus,
)
from taskboard.domain.value_objects.core import ChecklistDescription, Description


@dataclass(frozen=True)
class TaskRecord:
    """Stored task row (leaf or container), without resolved relations."""

    id: int
    task_code: str | None
    title: str
    description: Description | None
    priority: TaskPriority
    category: TaskCategory
    status: TaskStatus
    admin_approved: bool
    start_date: date | None
    due_date: date | None
    assigned_to: int | None
    created_by: int
    parent_task_id: int | None
    is_super_task: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewTask:
    """Values for inserting a task row."""

    title: str
    created_by: int
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    description: Description | None = None
    task_code: str | None = None
    assigned_to: int | None = None
    start_date: date | None = None
    due_date: date | None = None
    is_super_task: bool = False


@dataclass(frozen=True)
class TaskFilters:
    """Filters for listing root tasks."""

    assigned_to: int | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None


class _Unset:
    """Marker for fields absent from a partial update."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class TaskUpdate:
    """Partial task update. Fields left as UNSET are not changed.

    assigned_users replaces the whole assignee set; assigned_to, when given,
    becomes the primary (first) assignee.
    """

    title: Any = UNSET
    description: Any = UNSET
    priority: Any = UNSET
    category: Any = UNSET
    status: Any = UNSET
    start_date: Any = UNSET
    due_date: Any = UNSET
    assigned_to: Any = UNSET
    assigned_users: Any = UNSET

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


@dataclass(frozen=True)
class TaskSnapshot:
    """Task read-model handed to presentation and the notification emitter.

    Carries the resolved assignees and, for super tasks, the child
    snapshots read in the same transaction as the container.
    """

    id: int
    task_code: str | None
    title: str
    description: Description | None
    priority: TaskPriority
    category: TaskCategory
    status: TaskStatus
    admin_approved: bool
    start_date: date | None
    due_date: date | None
    assigned_to: int | None
    created_by: int
    parent_task_id: int | None
    is_super_task: bool
    created_at: datetime
    updated_at: datetime
    assignees: tuple[UserResult, ...] = ()
    children: tuple[TaskSnapshot, ...] = ()

    @property
    def assignee_ids(self) -> tuple[int, ...]:
        return tuple(u.id for u in self.assignees)

    @property
    def checklist_progress(self) -> tuple[int, int] | None:
        """(checked, total) for checklist descriptions, else None."""
        if isinstance(self.description, ChecklistDescription):
            return (self.description.checked_count, self.description.total_count)
        return None


@dataclass(frozen=True)
class DomainEvent:
    """Event produced by a successful mutation, consumed by the notification emitter.

    affected_user_ids never includes the acting user.
    """

    event_type: TaskEventType
    task: TaskSnapshot
    affected_user_ids: tuple[int, ...]
    actor_id: int | None = None
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TaskCommandResult:
    """Outcome of a lifecycle or grouping command: new aggregate view plus events."""

    task: TaskSnapshot
    events: list[DomainEvent] = field(default_factory=list)
