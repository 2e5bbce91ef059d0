"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from taskboard.api.v1.dependencies (no manual repo/service
construction).
"""

from fastapi import APIRouter

from taskboard.api.v1.endpoints import (
    health,
    notifications,
    super_tasks,
    tasks,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
# Before /tasks so /tasks/super is not read as a task id.
api_router.include_router(
    super_tasks.router, prefix="/tasks/super", tags=["super-tasks"]
)
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
