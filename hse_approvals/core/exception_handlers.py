"""Exception handlers: map errors to JSON responses.

Every error body has the shape {"error", "message", "details"} plus the
trace_id when a span is active. Domain exceptions choose their status by
error_code; anything unhandled becomes a 500 that hides its message unless
DEBUG is on.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hse_approvals.core.config import get_settings
from hse_approvals.domain.exceptions import ApprovalFlowException
from hse_approvals.shared.telemetry.tracing import get_trace_id

logger = logging.getLogger(__name__)

ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "RESOURCE_NOT_FOUND": 404,
    "SERVICE_UNAVAILABLE": 503,
    "STORE_UNAVAILABLE": 503,
}


def _error_response(
    status_code: int,
    body: dict,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    trace_id = get_trace_id()
    if trace_id:
        body = {**body, "trace_id": trace_id}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def approval_flow_exception_handler(
    request: Request, exc: ApprovalFlowException
) -> JSONResponse:
    status_code = ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return _error_response(status_code, exc.to_dict(), headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        422,
        {
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        },
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(
        exc.status_code,
        {"error": "HTTP_ERROR", "message": exc.detail, "details": {}},
        getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception on %s %s (trace_id=%s)",
        request.method,
        request.url.path,
        get_trace_id(),
    )
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(
        500,
        {"error": "INTERNAL_ERROR", "message": message, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on app. Call once from create_app()."""
    app.add_exception_handler(ApprovalFlowException, approval_flow_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
