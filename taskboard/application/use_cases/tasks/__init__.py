"""Task use cases: lifecycle of single tasks and super task grouping."""

from taskboard.application.use_cases.tasks.super_task_operations import (
    SuperTaskService,
)
from taskboard.application.use_cases.tasks.task_lifecycle import TaskLifecycleService
from taskboard.application.use_cases.tasks.task_snapshots import TaskSnapshotBuilder

__all__ = [
    "SuperTaskService",
    "TaskLifecycleService",
    "TaskSnapshotBuilder",
]
