"""Task code allocation.

Codes embed a role prefix, the month, a per (prefix, year, month) counter and
the two-digit year. The counter is advanced by the counter repository in a
single atomic statement, so concurrent allocations for the same key never
observe the same value.
"""

from __future__ import annotations

import logging

from taskboard.application.interfaces.repositories import ITaskCounterRepository
from taskboard.application.services.role_registry import RoleRegistry
from taskboard.domain.exceptions import ConflictException
from taskboard.domain.value_objects.core import TaskCode
from taskboard.shared.utils.datetime import system_now

logger = logging.getLogger(__name__)


class TaskCodeAllocator:
    """Allocate human-readable task codes. Implements ITaskCodeAllocator."""

    def __init__(
        self,
        counter_repo: ITaskCounterRepository,
        role_registry: RoleRegistry,
        timezone: str,
    ) -> None:
        self._counter_repo = counter_repo
        self._roles = role_registry
        self._timezone = timezone

    async def allocate(self, role_prefix: str, year: int, month: int) -> TaskCode:
        """Allocate the next code for (role_prefix, year, month).

        Raises:
            ConflictException: If the counter could not be advanced. No code
                is returned in that case.
        """
        counter = await self._counter_repo.increment(role_prefix, year, month)
        if counter < 1:
            raise ConflictException(
                f"Task counter returned invalid value {counter} for "
                f"{role_prefix}/{year}/{month}",
                resource_type="task_counter",
            )
        code = TaskCode(role_prefix=role_prefix, year=year, month=month, counter=counter)
        logger.debug("Allocated task code %s", code.value)
        return code

    async def allocate_for_role(self, role: str) -> TaskCode:
        """Allocate the next code for role in the current month (system time zone)."""
        now = system_now(self._timezone)
        return await self.allocate(self._roles.prefix_for(role), now.year, now.month)
