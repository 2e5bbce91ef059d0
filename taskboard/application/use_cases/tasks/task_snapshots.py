"""Task snapshot assembly: resolve assignees and container members for reads."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import fields, replace

from taskboard.application.dtos.task import TaskRecord, TaskSnapshot
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.repositories import (
    IAssignmentRepository,
    ITaskRepository,
    IUserRepository,
)
from taskboard.domain.entities.task import derive_super_task_status, super_task_approval

_RECORD_FIELDS = tuple(f.name for f in fields(TaskRecord))


def _snapshot(
    record: TaskRecord,
    assignees: Sequence[UserResult],
    children: Sequence[TaskSnapshot] = (),
) -> TaskSnapshot:
    snap = TaskSnapshot(
        **{name: getattr(record, name) for name in _RECORD_FIELDS},
        assignees=tuple(assignees),
        children=tuple(children),
    )
    if record.is_super_task:
        # Status shown for a container always matches the members read with it.
        status = derive_super_task_status(c.status for c in children)
        snap = replace(snap, status=status, admin_approved=super_task_approval(status))
    return snap


class TaskSnapshotBuilder:
    """Build TaskSnapshot read-models from stored rows.

    Containers get their members attached and their status recomputed from
    those members, so a reader never sees a partial rollup.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        assignment_repo: IAssignmentRepository,
        user_repo: IUserRepository,
    ) -> None:
        self.task_repo = task_repo
        self.assignment_repo = assignment_repo
        self.user_repo = user_repo

    async def build(self, record: TaskRecord) -> TaskSnapshot:
        return (await self.build_many([record]))[0]

    async def build_many(self, records: Sequence[TaskRecord]) -> list[TaskSnapshot]:
        """Build snapshots for records, batching assignee and user lookups."""
        children_by_parent: dict[int, list[TaskRecord]] = {}
        for record in records:
            if record.is_super_task:
                children_by_parent[record.id] = await self.task_repo.list_children(
                    record.id
                )
        every_record = list(records) + [
            child for children in children_by_parent.values() for child in children
        ]
        assignee_ids = await self.assignment_repo.get_user_ids_for_tasks(
            [r.id for r in every_record]
        )
        users = await self.user_repo.get_by_ids(
            sorted({uid for ids in assignee_ids.values() for uid in ids})
        )

        def resolve(task_id: int) -> list[UserResult]:
            return [users[uid] for uid in assignee_ids.get(task_id, []) if uid in users]

        snapshots = []
        for record in records:
            children = [
                _snapshot(child, resolve(child.id))
                for child in children_by_parent.get(record.id, [])
            ]
            snapshots.append(_snapshot(record, resolve(record.id), children))
        return snapshots
