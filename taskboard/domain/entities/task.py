"""Task domain rules.

Pure functions over task state: super task status derivation, the
completion-approval gate, and assignee list normalization. No ORM or
persistence concerns; services call these before persisting.
"""

from collections.abc import Iterable

from taskboard.domain.enums import TaskStatus


def derive_super_task_status(child_statuses: Iterable[TaskStatus | str]) -> TaskStatus:
    """Return a super task's status from its children's statuses.

    - No children: pending (an empty container never completes).
    - All children completed: completed.
    - Any child in progress or completed: in_progress.
    - Otherwise: pending.
    """
    statuses = [TaskStatus(s) for s in child_statuses]
    if not statuses:
        return TaskStatus.PENDING
    if all(s == TaskStatus.COMPLETED for s in statuses):
        return TaskStatus.COMPLETED
    if any(s in (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED) for s in statuses):
        return TaskStatus.IN_PROGRESS
    return TaskStatus.PENDING


def approval_after_status_change(new_status: TaskStatus, acting_is_admin: bool) -> bool:
    """Return admin_approved after a leaf status change.

    Completing a task as an admin approves it immediately; completing it as
    anyone else leaves it pending approval. Any other status clears approval.
    """
    if new_status == TaskStatus.COMPLETED:
        return acting_is_admin
    return False


def super_task_approval(derived_status: TaskStatus) -> bool:
    """Containers are approved exactly when their derived status is completed."""
    return derived_status == TaskStatus.COMPLETED


def normalize_assignees(
    assigned_users: Iterable[int] | None,
    primary_assignee: int | None = None,
) -> list[int]:
    """Return the ordered, de-duplicated assignee list.

    The primary assignee (when given) is placed first so that it is always
    part of the set and remains the legacy "assigned_to" value.
    """
    ordered: list[int] = []
    if primary_assignee is not None:
        ordered.append(primary_assignee)
    for user_id in assigned_users or ():
        if user_id not in ordered:
            ordered.append(user_id)
    return ordered


def notification_recipients(
    user_ids: Iterable[int], actor_id: int | None
) -> tuple[int, ...]:
    """Distinct user ids in first-seen order, excluding the acting user."""
    return tuple(uid for uid in dict.fromkeys(user_ids) if uid != actor_id)
