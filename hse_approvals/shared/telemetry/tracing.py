"""Tracing helpers over the OpenTelemetry API.

Resolver entry points run inside a span named after the operation, and
degraded lookups are attached to it as span events. Only allowlisted keyword
arguments are copied onto spans: user ids and tokens never are.
"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

TRACER_NAME = "hse_approvals"
ATTRIBUTE_PREFIX = "approval."

_RECORDED_ARGUMENTS = frozenset({"process_type", "subject_id", "company_id", "scope", "level_key"})


def _record_arguments(span: trace.Span, kwargs: dict[str, Any]) -> None:
    for key, value in kwargs.items():
        if key in _RECORDED_ARGUMENTS and value is not None:
            span.set_attribute(ATTRIBUTE_PREFIX + key, str(value))


def traced(operation_name: str | None = None) -> Callable:
    """Run a coroutine function inside its own span.

    Exceptions mark the span as failed and propagate unchanged; cancellation
    is left to the SDK (the span simply ends).
    """

    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() expects a coroutine function, got {func!r}")
        span_name = operation_name or func.__qualname__

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = trace.get_tracer(TRACER_NAME)
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _record_arguments(span, kwargs)
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Set approval.* attributes on the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(ATTRIBUTE_PREFIX + key, value)


def add_span_event(name: str, attributes: dict | None = None) -> None:
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})


def get_trace_id() -> str | None:
    """Current trace id as 32-char hex, or None outside a valid span."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None
    return format(ctx.trace_id, "032x")
