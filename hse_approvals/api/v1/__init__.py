"""API v1: routers and dependencies."""

from hse_approvals.api.v1.router import api_router

__all__ = ["api_router"]
