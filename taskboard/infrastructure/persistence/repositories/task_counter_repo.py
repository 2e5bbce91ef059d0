"""Task counter repository: atomic per (role_prefix, year, month) counter."""

from __future__ import annotations

import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.domain.exceptions import ConflictException
from taskboard.infrastructure.persistence.models.task import TaskCounter

logger = logging.getLogger(__name__)


class TaskCounterRepository:
    """Task counter repository. Implements ITaskCounterRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def increment(self, role_prefix: str, year: int, month: int) -> int:
        """Increment and return the counter in one upsert statement.

        INSERT ... ON CONFLICT DO UPDATE SET counter = counter + 1 RETURNING
        counter: the row lock taken by the conflicting update serializes
        concurrent callers on the same key, so each sees a distinct value.

        Raises:
            ConflictException: If the statement fails; no value is returned.
        """
        stmt = pg_insert(TaskCounter).values(
            role_prefix=role_prefix, year=year, month=month, counter=1
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[TaskCounter.role_prefix, TaskCounter.year, TaskCounter.month],
            set_={"counter": TaskCounter.counter + 1},
        ).returning(TaskCounter.counter)
        try:
            result = await self.db.execute(stmt)
            counter = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(
                "Task counter increment failed for %s/%s/%s: %s",
                role_prefix,
                year,
                month,
                e,
            )
            raise ConflictException(
                "Could not allocate a task code", resource_type="task_counter"
            ) from e
        return int(counter)
