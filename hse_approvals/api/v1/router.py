"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from hse_approvals.api.v1.dependencies.
"""

from fastapi import APIRouter

from hse_approvals.api.v1.endpoints import approvals, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    approvals.router, prefix="/approval-flows", tags=["approval-flows"]
)
