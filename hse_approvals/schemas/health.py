"""Health and readiness response schemas."""

from typing import Literal

from pydantic import BaseModel, Field

ComponentState = Literal["ok", "not_configured", "disabled", "unavailable"]


class HealthResponse(BaseModel):
    """Liveness: the process is up."""

    status: Literal["ok"] = "ok"
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness per dependency. Only the database gates readiness; the cache is optional."""

    status: Literal["ready", "not_ready"]
    database: ComponentState
    cache: ComponentState = Field(description="Redis configuration cache")
