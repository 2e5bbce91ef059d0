"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (telemetry, DB
engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskboard.core.config import get_settings
from taskboard.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, telemetry (if enabled). Shutdown: telemetry flush,
    SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()

    if settings.telemetry_enabled:
        from taskboard.infrastructure.persistence import database
        from taskboard.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        database.ensure_engine()
        if database.engine is not None:
            telemetry.instrument_sqlalchemy(database.engine)
        logger.info("Telemetry initialized")

    logger.info(
        "%s %s started (timezone=%s, poll interval=%ss)",
        settings.app_name,
        settings.app_version,
        settings.timezone,
        settings.poll_interval_seconds,
    )

    yield

    # ---- Shutdown ----
    if settings.telemetry_enabled:
        from taskboard.shared.telemetry.telemetry import get_telemetry, set_telemetry

        telemetry_instance = get_telemetry()
        if telemetry_instance is not None:
            telemetry_instance.shutdown()
            set_telemetry(None)

    from taskboard.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
