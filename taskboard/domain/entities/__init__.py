"""Domain entities and aggregate rules.

Pure domain models; no ORM or persistence concerns.
"""

from taskboard.domain.entities.task import (
    approval_after_status_change,
    derive_super_task_status,
    normalize_assignees,
    notification_recipients,
    super_task_approval,
)

__all__ = [
    "approval_after_status_change",
    "derive_super_task_status",
    "normalize_assignees",
    "notification_recipients",
    "super_task_approval",
]
