"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators of the orchestration engine (DIP).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskboard.application.dtos.task import DomainEvent
    from taskboard.domain.value_objects.core import TaskCode


# Role registry interface
class IRoleRegistry(Protocol):
    """Protocol for role capability lookup. Roles are opaque strings."""

    def is_admin(self, role: str) -> bool:
        """Return whether the role carries admin capability."""

    def prefix_for(self, role: str) -> str:
        """Return the two-letter task code prefix for the role."""


# Task code allocator interface
class ITaskCodeAllocator(Protocol):
    """Protocol for allocating human-readable task codes."""

    async def allocate(self, role_prefix: str, year: int, month: int) -> TaskCode:
        """Allocate the next code for (role_prefix, year, month)."""

    async def allocate_for_role(self, role: str) -> TaskCode:
        """Allocate the next code for role in the current system month."""


# Notification emitter interface
class INotificationEmitter(Protocol):
    """Protocol for the sink of domain events.

    Receives (event type, task snapshot, affected user ids) after each
    successful mutation. Delivery, deduplication, and read state are its
    concern; it never reads task data beyond the snapshot it is given.
    """

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Consume events produced by one command."""
