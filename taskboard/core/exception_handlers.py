"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses (SRP, OCP for adding new handlers).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.core.config import get_settings
from taskboard.domain.exceptions import TaskboardException
from taskboard.infrastructure.persistence.database import (
    is_write_conflict,
    write_conflict_exception,
)

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "FORBIDDEN": 403,
    "INVALID_STATE": 409,
    "INVALID_GROUP": 400,
    "NOT_A_SUPER_TASK": 400,
    "ALREADY_GROUPED": 400,
    "CONFLICT": 409,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for_error_code(error_code: str) -> int:
    """HTTP status for a domain error code (400 for unknown codes)."""
    return _ERROR_CODE_STATUS.get(error_code, 400)


def _taskboard_exception_handler(
    request: Request, exc: TaskboardException
) -> JSONResponse:
    """Return JSON from TaskboardException.to_dict() with appropriate status code."""
    status = status_for_error_code(exc.error_code)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic error list without non-serializable ctx values."""
    errors = []
    for err in exc.errors():
        item = {k: v for k, v in err.items() if k != "ctx"}
        if "ctx" in err:
            item["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(item)
    return errors


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _database_exception_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    """Return 409 CONFLICT when the request lost a race; otherwise 500."""
    if is_write_conflict(exc):
        logger.warning("Write conflict on %s: %s", request.url.path, exc.orig)
        return _taskboard_exception_handler(request, write_conflict_exception())
    return _generic_exception_handler(request, exc)


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: TaskboardException (and
    subclasses), RequestValidationError, StarletteHTTPException, DBAPIError
    (write conflicts as 409), generic Exception.
    """
    app.add_exception_handler(TaskboardException, _taskboard_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(DBAPIError, _database_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
