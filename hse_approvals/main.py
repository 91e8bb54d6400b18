"""FastAPI application for the approval flow resolver.

Wiring only: lifespan, exception handlers, CORS and the v1 router. The API
is read-only, so CORS allows GET alone. Settings are resolved inside
create_app() so tests can change the environment (and clear the settings
cache) before building an app.

Run with: uvicorn hse_approvals.main:app
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hse_approvals.api.v1 import api_router
from hse_approvals.api.v1.dependencies import DEV_USER_HEADER
from hse_approvals.core.config import get_settings
from hse_approvals.core.exception_handlers import register_exception_handlers
from hse_approvals.core.lifespan import create_lifespan

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Resolves HSE approval flows: levels, approvers and their statuses.",
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    # Replaced by the lifespan when Redis is enabled.
    app.state.cache = None

    allowed_headers = ["Authorization", "Content-Type", settings.company_header_name]
    if not settings.auth_enabled:
        allowed_headers.append(DEV_USER_HEADER)

    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=allowed_headers,
    )
    app.include_router(api_router, prefix=API_PREFIX)
    return app


app = create_app()
