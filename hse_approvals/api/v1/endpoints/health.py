"""Liveness and readiness probes."""

from fastapi import APIRouter, Request, Response

from hse_approvals.core.config import get_settings
from hse_approvals.infrastructure.firebase.client import get_database_client
from hse_approvals.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(service=settings.app_name, version=settings.app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Realtime Database client not initialized", "model": ReadinessResponse}},
)
def readiness_check(request: Request, response: Response) -> ReadinessResponse:
    """200 once the Realtime Database client exists, else 503."""
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        cache_state = "disabled"
    else:
        cache_state = "ok" if cache.is_available() else "unavailable"

    if get_database_client() is None:
        response.status_code = 503
        return ReadinessResponse(status="not_ready", database="not_configured", cache=cache_state)
    return ReadinessResponse(status="ready", database="ok", cache=cache_state)
