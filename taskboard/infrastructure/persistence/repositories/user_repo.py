"""User repository. Interface methods return application DTOs."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.user import UserResult
from taskboard.domain.exceptions import ConflictException
from taskboard.infrastructure.persistence.models.user import User
from taskboard.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult."""
    return UserResult(
        id=u.id,
        username=u.username,
        full_name=u.full_name,
        role=u.role,
        avatar_color=u.avatar_color,
        created_at=u.created_at,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Implements IUserRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: int) -> UserResult | None:
        user = await self._get(user_id)
        return _user_to_result(user) if user else None

    async def get_by_ids(self, user_ids: Sequence[int]) -> dict[int, UserResult]:
        users = await self._get_many(list(set(user_ids)))
        return {u.id: _user_to_result(u) for u in users}

    async def get_by_username(self, username: str) -> UserResult | None:
        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def list_users(self) -> list[UserResult]:
        result = await self.db.execute(select(User).order_by(User.full_name, User.id))
        return [_user_to_result(u) for u in result.scalars().all()]

    async def create_user(
        self, username: str, full_name: str, role: str, avatar_color: str
    ) -> UserResult:
        """Create a user.

        Raises:
            ConflictException: If the username is already taken.
        """
        user = User(
            username=username,
            full_name=full_name,
            role=role,
            avatar_color=avatar_color,
        )
        try:
            async with self.db.begin_nested():
                created = await self._create(user)
        except IntegrityError:
            raise ConflictException(
                f"Username already exists: {username}", resource_type="user"
            ) from None
        return _user_to_result(created)
