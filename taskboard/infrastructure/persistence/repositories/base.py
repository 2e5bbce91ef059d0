"""Base repository: generic get/create/delete over one ORM model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.infrastructure.persistence.database import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with keyed reads (optionally locking), create, save and delete.

    Subclasses map ORM rows to application DTOs in their public methods;
    the helpers here return ORM instances bound to the request session.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get(self, entity_id: int, *, for_update: bool = False) -> ModelType | None:
        """Return a single record by primary key, or None.

        With for_update the row stays locked until the transaction ends.
        """
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_many(self, entity_ids: list[int]) -> list[ModelType]:
        if not entity_ids:
            return []
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id.in_(entity_ids)))
        return list(result.scalars().all())

    async def _create(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _save(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()
