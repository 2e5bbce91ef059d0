"""Application services: role registry and task code allocation."""

from taskboard.application.services.role_registry import RoleRegistry
from taskboard.application.services.task_code_allocator import TaskCodeAllocator

__all__ = [
    "RoleRegistry",
    "TaskCodeAllocator",
]
