"""Logging and OpenTelemetry tracing for the resolver service."""

from hse_approvals.shared.telemetry.logging import get_logger, setup_logging
from hse_approvals.shared.telemetry.telemetry import (
    TelemetryConfig,
    build_exporter,
    get_telemetry,
    set_telemetry,
)
from hse_approvals.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    get_trace_id,
    traced,
)

__all__ = [
    "TelemetryConfig",
    "add_span_attributes",
    "add_span_event",
    "build_exporter",
    "get_logger",
    "get_telemetry",
    "get_trace_id",
    "set_telemetry",
    "setup_logging",
    "traced",
]
