"""Application use cases: one entry point per workflow."""

from taskboard.application.use_cases.tasks import (
    SuperTaskService,
    TaskLifecycleService,
    TaskSnapshotBuilder,
)

__all__ = [
    "SuperTaskService",
    "TaskLifecycleService",
    "TaskSnapshotBuilder",
]
