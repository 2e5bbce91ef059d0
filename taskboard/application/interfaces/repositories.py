"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from taskboard.application.dtos.notification import (
        NotificationCreate,
        NotificationResult,
    )
    from taskboard.application.dtos.task import NewTask, TaskFilters, TaskRecord
    from taskboard.application.dtos.user import UserResult
    from taskboard.domain.enums import TaskStatus


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for task rows (leaves and super task containers)."""

    async def get_by_id(self, task_id: int) -> TaskRecord | None:
        """Return task by ID."""

    async def get_by_code(self, task_code: str) -> TaskRecord | None:
        """Return task by its human-readable code."""

    async def get_for_update(self, task_id: int) -> TaskRecord | None:
        """Return task by ID and lock its row until the transaction ends."""

    async def list_root_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """Return tasks without a parent (newest first), applying filters."""

    async def list_children(self, parent_task_id: int) -> list[TaskRecord]:
        """Return members of a super task (oldest first)."""

    async def lock_children(self, parent_task_id: int) -> list[int]:
        """Lock every member row of a super task in ascending id order; return the ids."""

    async def create_task(self, data: NewTask) -> TaskRecord:
        """Insert a task row."""

    async def update_fields(self, task_id: int, values: dict[str, Any]) -> TaskRecord:
        """Update plain columns of a task and return the stored row."""

    async def set_status(
        self, task_id: int, status: TaskStatus, admin_approved: bool
    ) -> TaskRecord:
        """Write status and approval together."""

    async def set_parent(
        self, task_ids: Sequence[int], parent_task_id: int | None
    ) -> None:
        """Point the given tasks at a container (or clear the parent with None)."""

    async def orphan_children(self, parent_task_id: int) -> list[int]:
        """Clear parent_task_id on every member of a container; return their ids."""

    async def delete_task(self, task_id: int) -> None:
        """Delete a task row (assignments cascade)."""


# Assignment repository interface
class IAssignmentRepository(Protocol):
    """Protocol for the many-to-many task/user assignment relation."""

    async def get_user_ids(self, task_id: int) -> list[int]:
        """Return assignee ids in order (primary first)."""

    async def get_user_ids_for_tasks(
        self, task_ids: Sequence[int]
    ) -> dict[int, list[int]]:
        """Return assignee ids per task (batch); tasks without assignees map to []."""

    async def add(self, task_id: int, user_ids: Sequence[int]) -> None:
        """Insert assignments for a new task."""

    async def replace(self, task_id: int, user_ids: Sequence[int]) -> None:
        """Atomically replace the assignee set.

        Raises ConflictException when the replacement fails; the previous set
        is left intact.
        """


# Task counter repository interface
class ITaskCounterRepository(Protocol):
    """Protocol for the per (role_prefix, year, month) task code counter."""

    async def increment(self, role_prefix: str, year: int, month: int) -> int:
        """Atomically increment and return the new counter value."""


# User repository interface
class IUserRepository(Protocol):
    """Protocol for the user directory."""

    async def get_by_id(self, user_id: int) -> UserResult | None:
        """Return user by ID."""

    async def get_by_ids(self, user_ids: Sequence[int]) -> dict[int, UserResult]:
        """Return users keyed by id (batch); missing ids are omitted."""

    async def get_by_username(self, username: str) -> UserResult | None:
        """Return user by unique username."""

    async def list_users(self) -> list[UserResult]:
        """Return all users ordered by full name."""

    async def create_user(
        self, username: str, full_name: str, role: str, avatar_color: str
    ) -> UserResult:
        """Create a user."""


# Notification repository interface
class INotificationRepository(Protocol):
    """Protocol for notification records."""

    async def create_many(self, items: Sequence[NotificationCreate]) -> int:
        """Insert notifications; return how many were written."""

    async def list_for_user(
        self, user_id: int, limit: int = 50
    ) -> list[NotificationResult]:
        """Return the user's notifications (newest first)."""

    async def count_unread(self, user_id: int) -> int:
        """Return the user's unread notification count."""

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        """Mark one of the user's notifications read; False if not found."""

    async def mark_all_read(self, user_id: int) -> int:
        """Mark all of the user's notifications read; return how many changed."""
