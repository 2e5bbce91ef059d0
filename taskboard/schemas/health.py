"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    version: str | None = None
    poll_interval_seconds: int | None = Field(
        default=None, description="Recommended client polling interval"
    )


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready when the database answers."""

    status: str = Field(default="ok", description="Readiness status")


class ReadinessErrorResponse(BaseModel):
    """Response for GET /health/ready when the database is unavailable (503)."""

    status: str = Field(default="not_ready", description="Readiness status")
    message: str = Field(..., description="Reason (e.g. database not configured)")
