"""Health check endpoints for liveness and readiness checks."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskboard.core.config import get_settings
from taskboard.infrastructure.persistence import database
from taskboard.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status, version and the recommended polling interval."""
    settings = get_settings()
    return HealthResponse(
        version=settings.app_version,
        poll_interval_seconds=settings.poll_interval_seconds,
    )


def _not_ready(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(status="not_ready", message=message).model_dump(),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database not reachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers SELECT 1; 503 otherwise."""
    database.ensure_engine()
    if database.engine is None:
        return _not_ready("Database not configured")
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return _not_ready(f"Database unavailable: {type(e).__name__}")
    return ReadinessResponse()
