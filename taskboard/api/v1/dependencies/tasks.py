"""Task and super task service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.interfaces.services import INotificationEmitter
from taskboard.application.services.role_registry import RoleRegistry
from taskboard.application.services.task_code_allocator import TaskCodeAllocator
from taskboard.application.use_cases.tasks import (
    SuperTaskService,
    TaskLifecycleService,
    TaskSnapshotBuilder,
)
from taskboard.core.config import get_settings
from taskboard.infrastructure.persistence.database import get_db, get_db_transactional
from taskboard.infrastructure.persistence.repositories import NotificationRepository
from taskboard.infrastructure.services import SqlNotificationEmitter

from . import db as db_deps
from .users import get_role_registry


def build_task_services(
    db: AsyncSession, roles: RoleRegistry
) -> tuple[TaskLifecycleService, SuperTaskService]:
    """Lifecycle and super task services sharing one session."""
    settings = get_settings()
    task_repo, assignment_repo, user_repo, counter_repo = db_deps.build_task_repos(db)
    snapshots = TaskSnapshotBuilder(task_repo, assignment_repo, user_repo)
    super_tasks = SuperTaskService(task_repo, assignment_repo, snapshots)
    lifecycle = TaskLifecycleService(
        task_repo,
        assignment_repo,
        user_repo,
        TaskCodeAllocator(counter_repo, roles, settings.timezone),
        roles,
        super_tasks,
        snapshots,
        timezone=settings.timezone,
        default_start_offset_days=settings.default_start_offset_days,
    )
    return lifecycle, super_tasks


async def get_task_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    roles: Annotated[RoleRegistry, Depends(get_role_registry)],
) -> TaskLifecycleService:
    """Lifecycle service for read routes (no transaction)."""
    return build_task_services(db, roles)[0]


async def get_task_lifecycle_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    roles: Annotated[RoleRegistry, Depends(get_role_registry)],
) -> TaskLifecycleService:
    """Lifecycle service in the request transaction."""
    return build_task_services(db, roles)[0]


async def get_super_task_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    roles: Annotated[RoleRegistry, Depends(get_role_registry)],
) -> SuperTaskService:
    """Super task service in the request transaction."""
    return build_task_services(db, roles)[1]


async def get_notification_emitter(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> INotificationEmitter:
    """Emitter writing notifications in the request transaction (savepoint)."""
    return SqlNotificationEmitter(db, NotificationRepository(db))
