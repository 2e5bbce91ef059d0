"""Repository dependencies (composition root).

Read routes get repositories on a plain session (get_db); write routes get
them on the request transaction (get_db_transactional). FastAPI caches a
dependency per request, so every repository of one write request shares
the same session and transaction.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.infrastructure.persistence.database import get_db, get_db_transactional
from taskboard.infrastructure.persistence.repositories import (
    AssignmentRepository,
    NotificationRepository,
    TaskCounterRepository,
    TaskRepository,
    UserRepository,
)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for reads."""
    return UserRepository(db)


async def get_user_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRepository:
    """User repository in the request transaction."""
    return UserRepository(db)


async def get_notification_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationRepository:
    return NotificationRepository(db)


async def get_notification_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> NotificationRepository:
    return NotificationRepository(db)


def build_task_repos(
    db: AsyncSession,
) -> tuple[TaskRepository, AssignmentRepository, UserRepository, TaskCounterRepository]:
    """Task, assignment, user and counter repositories on one session."""
    return (
        TaskRepository(db),
        AssignmentRepository(db),
        UserRepository(db),
        TaskCounterRepository(db),
    )
