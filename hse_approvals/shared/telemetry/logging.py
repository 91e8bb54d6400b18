"""Logging setup for the approval resolver service.

Records go to stdout. Every record carries a trace_id field (the current
OpenTelemetry trace, or "-" outside a span), so a degraded-lookup warning can
be matched to the request that produced it.
"""

import logging
import sys

from hse_approvals.core.config import get_settings
from hse_approvals.shared.telemetry.tracing import get_trace_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [trace_id=%(trace_id)s] - %(message)s"

# HTTP and auth client libraries log every request at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore", "google.auth", "urllib3")


class TraceContextFilter(logging.Filter):
    """Adds record.trace_id from the active span."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id() or "-"
        return True


def setup_logging() -> None:
    """Configure root logging once at startup.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceContextFilter())
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
