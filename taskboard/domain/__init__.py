"""Domain layer: task rules, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from taskboard.domain.enums import (
    TaskCategory,
    TaskEventType,
    TaskPriority,
    TaskStatus,
)
from taskboard.domain.exceptions import (
    AlreadyGroupedException,
    ConflictException,
    ForbiddenException,
    InvalidGroupException,
    InvalidStateException,
    NotASuperTaskException,
    ResourceNotFoundException,
    TaskboardException,
    ValidationException,
)
from taskboard.domain.value_objects import (
    ChecklistDescription,
    ChecklistItem,
    Role,
    TaskCode,
    TextDescription,
)

__all__ = [
    # Enums
    "TaskCategory",
    "TaskEventType",
    "TaskPriority",
    "TaskStatus",
    # Exceptions
    "AlreadyGroupedException",
    "ConflictException",
    "ForbiddenException",
    "InvalidGroupException",
    "InvalidStateException",
    "NotASuperTaskException",
    "ResourceNotFoundException",
    "TaskboardException",
    "ValidationException",
    # Value objects
    "ChecklistDescription",
    "ChecklistItem",
    "Role",
    "TaskCode",
    "TextDescription",
]
