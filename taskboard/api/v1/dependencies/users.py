"""Acting user and role registry dependencies.

Session handling is out of scope: the acting user id arrives in the header
named by settings.acting_user_header (X-User-ID) and is resolved against
the user directory.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.repositories import IUserRepository
from taskboard.application.services.role_registry import RoleRegistry
from taskboard.core.config import get_settings

from . import db as db_deps


@lru_cache
def get_role_registry() -> RoleRegistry:
    """Role registry built once from settings."""
    return RoleRegistry.from_settings(get_settings())


async def _resolve_acting_user(request: Request, user_repo: IUserRepository) -> UserResult:
    header = get_settings().acting_user_header
    raw = request.headers.get(header)
    if not raw:
        raise HTTPException(status_code=401, detail=f"Missing {header} header")
    try:
        user_id = int(raw)
    except ValueError:
        raise HTTPException(
            status_code=400, detail=f"{header} must be an integer user id"
        ) from None
    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown acting user")
    return user


async def get_acting_user(
    request: Request,
    user_repo: Annotated[IUserRepository, Depends(db_deps.get_user_repo)],
) -> UserResult:
    """Acting user for read routes."""
    return await _resolve_acting_user(request, user_repo)


async def get_acting_user_for_write(
    request: Request,
    user_repo: Annotated[IUserRepository, Depends(db_deps.get_user_repo_for_write)],
) -> UserResult:
    """Acting user for write routes (resolved in the request transaction)."""
    return await _resolve_acting_user(request, user_repo)
