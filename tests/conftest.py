"""Pytest configuration and fixtures for taskboard.

Unit and API tests run against in-memory repositories (tests.fakes); the
HTTP client drives taskboard.main:app with the service dependencies
overridden. Repository integration tests need PostgreSQL (requires_db).
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.v1.dependencies import (
    get_notification_emitter,
    get_notification_repo,
    get_notification_repo_for_write,
    get_super_task_service,
    get_task_lifecycle_service,
    get_task_query_service,
    get_user_repo,
    get_user_repo_for_write,
)
from taskboard.application.dtos.user import UserResult
from taskboard.infrastructure.persistence import database
from taskboard.main import app
from tests.fakes import Services, build_services

ADMIN_ID = 1
DESIGNER_ID = 2
ASSISTANT_ID = 3
AUDIOVISUAL_ID = 4


def as_user(user_id: int) -> dict[str, str]:
    """Headers identifying the acting user."""
    return {"X-User-ID": str(user_id)}


@pytest.fixture
def services() -> Services:
    """Fake-backed services with four users: admin, designer, assistant, audiovisual."""
    svc = build_services()
    svc.store.add_user(ADMIN_ID, "ana", "admin")
    svc.store.add_user(DESIGNER_ID, "diego", "designer")
    svc.store.add_user(ASSISTANT_ID, "alma", "assistant")
    svc.store.add_user(AUDIOVISUAL_ID, "victor", "audiovisual")
    return svc


@pytest.fixture
def admin(services: Services) -> UserResult:
    return services.store.users[ADMIN_ID]


@pytest.fixture
def designer(services: Services) -> UserResult:
    return services.store.users[DESIGNER_ID]


@pytest.fixture
def assistant(services: Services) -> UserResult:
    return services.store.users[ASSISTANT_ID]


@pytest.fixture
def audiovisual(services: Services) -> UserResult:
    return services.store.users[AUDIOVISUAL_ID]


@pytest.fixture
async def client(services: Services) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) over fake repositories."""
    app.dependency_overrides.update(
        {
            get_task_lifecycle_service: lambda: services.lifecycle,
            get_task_query_service: lambda: services.lifecycle,
            get_super_task_service: lambda: services.super_tasks,
            get_notification_emitter: lambda: services.emitter,
            get_user_repo: lambda: services.users,
            get_user_repo_for_write: lambda: services.users,
            get_notification_repo: lambda: services.notifications,
            get_notification_repo_for_write: lambda: services.notifications,
        }
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL (PostgreSQL, migrated with alembic upgrade head).
    Skips when it is not configured. Mark such tests with
    @pytest.mark.requires_db; run without DB via: pytest -m 'not requires_db'.
    """
    database.ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
