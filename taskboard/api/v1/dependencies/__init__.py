"""API dependencies (composition root).

Routes depend only on these providers, never on infrastructure directly.
"""

from taskboard.api.v1.dependencies.db import (
    get_notification_repo,
    get_notification_repo_for_write,
    get_user_repo,
    get_user_repo_for_write,
)
from taskboard.api.v1.dependencies.tasks import (
    get_notification_emitter,
    get_super_task_service,
    get_task_lifecycle_service,
    get_task_query_service,
)
from taskboard.api.v1.dependencies.users import (
    get_acting_user,
    get_acting_user_for_write,
    get_role_registry,
)

__all__ = [
    "get_acting_user",
    "get_acting_user_for_write",
    "get_notification_emitter",
    "get_notification_repo",
    "get_notification_repo_for_write",
    "get_role_registry",
    "get_super_task_service",
    "get_task_lifecycle_service",
    "get_task_query_service",
    "get_user_repo",
    "get_user_repo_for_write",
]
