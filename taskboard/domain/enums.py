"""Domain enumerations for the Taskboard application.

Enums represent fixed sets of domain values (task status, priority,
category, notification and domain event types). User roles are NOT an
enum; see taskboard.domain.value_objects.core.Role.
"""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for validation messages)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status.

    Any status is reachable from any other through an explicit status
    change on a leaf task. Super task status is derived from children.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(_ValuesMixin, str, Enum):
    """Task priority."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskCategory(_ValuesMixin, str, Enum):
    """Task category."""

    DESIGN = "design"
    CONTENT = "content"
    VIDEO = "video"
    CAMPAIGN = "campaign"
    SOCIAL = "social"
    OTHER = "other"


class TaskEventType(_ValuesMixin, str, Enum):
    """Domain events produced by the orchestration engine.

    Values double as the notification type stored on notification records.
    """

    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    TASK_APPROVED = "task_approved"
    SUPER_TASK_CREATED = "super_task_created"
    TASK_ADDED_TO_GROUP = "task_added_to_group"
    SUPER_TASK_COMPLETED = "super_task_completed"
