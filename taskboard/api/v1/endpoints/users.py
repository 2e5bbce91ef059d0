"""User API: thin routes over the user directory."""

from typing import Annotated

from fastapi import APIRouter, Depends

from taskboard.api.v1.dependencies import (
    get_acting_user,
    get_acting_user_for_write,
    get_role_registry,
    get_user_repo,
    get_user_repo_for_write,
)
from taskboard.application.dtos.user import UserResult
from taskboard.application.interfaces.repositories import IUserRepository
from taskboard.application.interfaces.services import IRoleRegistry
from taskboard.domain.exceptions import ForbiddenException, ResourceNotFoundException
from taskboard.schemas.user import UserCreateRequest, UserResponse

router = APIRouter()


def _to_response(user: UserResult, roles: IRoleRegistry) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        role=user.role,
        avatar_color=user.avatar_color,
        is_admin=roles.is_admin(user.role),
        created_at=user.created_at,
    )


@router.get("", response_model=list[UserResponse])
async def list_users(
    _: Annotated[UserResult, Depends(get_acting_user)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repo)],
    roles: Annotated[IRoleRegistry, Depends(get_role_registry)],
):
    """List users ordered by full name (for assignee pickers)."""
    return [_to_response(u, roles) for u in await user_repo.list_users()]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    body: UserCreateRequest,
    acting_user: Annotated[UserResult, Depends(get_acting_user_for_write)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repo_for_write)],
    roles: Annotated[IRoleRegistry, Depends(get_role_registry)],
):
    """Create a user (admin only). Duplicate usernames return 409."""
    if not roles.is_admin(acting_user.role):
        raise ForbiddenException("Only administrators can create users")
    user = await user_repo.create_user(
        username=body.username,
        full_name=body.full_name,
        role=body.role,
        avatar_color=body.avatar_color,
    )
    return _to_response(user, roles)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    _: Annotated[UserResult, Depends(get_acting_user)],
    user_repo: Annotated[IUserRepository, Depends(get_user_repo)],
    roles: Annotated[IRoleRegistry, Depends(get_role_registry)],
):
    """Get user by id."""
    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise ResourceNotFoundException("user", user_id)
    return _to_response(user, roles)
