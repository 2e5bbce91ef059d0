"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, notification emitter).
"""

from taskboard.application.interfaces import (
    IAssignmentRepository,
    INotificationEmitter,
    INotificationRepository,
    IRoleRegistry,
    ITaskCodeAllocator,
    ITaskCounterRepository,
    ITaskRepository,
    IUserRepository,
)
from taskboard.application.services import RoleRegistry, TaskCodeAllocator
from taskboard.application.use_cases.tasks import (
    SuperTaskService,
    TaskLifecycleService,
)

__all__ = [
    "IAssignmentRepository",
    "INotificationEmitter",
    "INotificationRepository",
    "IRoleRegistry",
    "ITaskCodeAllocator",
    "ITaskCounterRepository",
    "ITaskRepository",
    "IUserRepository",
    "RoleRegistry",
    "SuperTaskService",
    "TaskCodeAllocator",
    "TaskLifecycleService",
]
