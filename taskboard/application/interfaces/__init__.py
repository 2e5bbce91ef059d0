"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from taskboard.infrastructure or taskboard.api.
"""

from taskboard.application.interfaces.repositories import (
    IAssignmentRepository,
    INotificationRepository,
    ITaskCounterRepository,
    ITaskRepository,
    IUserRepository,
)
from taskboard.application.interfaces.services import (
    INotificationEmitter,
    IRoleRegistry,
    ITaskCodeAllocator,
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
]
