"""OpenTelemetry setup for the resolver service.

Spans are exported to an OTLP gRPC collector, printed to the console in
development, or kept in-process only ("none"). Built from Settings at
startup by the lifespan, registered process-wide, and shut down (flushing
pending spans) on exit.
"""

from __future__ import annotations

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from hse_approvals.core.config import Settings

logger = logging.getLogger(__name__)

EXPORTER_CONSOLE = "console"
EXPORTER_OTLP = "otlp"
EXPORTER_NONE = "none"

# Liveness and readiness probes.
_UNTRACED_URLS = "/api/v1/health,/api/v1/health/ready"


def build_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Span exporter for TELEMETRY_EXPORTER; None for "none"."""
    kind = kind.strip().lower()
    if kind == EXPORTER_NONE:
        return None
    if kind == EXPORTER_OTLP:
        if not otlp_endpoint:
            raise ValueError("TELEMETRY_OTLP_ENDPOINT is required for the otlp exporter")
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if kind != EXPORTER_CONSOLE:
        logger.warning("Unknown telemetry exporter %r; using console", kind)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider plus the instrumentations this service uses."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None
        self._instrumented_redis = False

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )

    @property
    def active(self) -> bool:
        return self.tracer_provider is not None

    def start(
        self,
        exporter: str = EXPORTER_CONSOLE,
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> bool:
        """Install the global tracer provider. Returns False if setup failed."""
        try:
            span_exporter = build_exporter(exporter, otlp_endpoint)
        except ValueError:
            logger.exception("Telemetry not started")
            return False
        provider = TracerProvider(
            resource=Resource(
                attributes={
                    SERVICE_NAME: self.service_name,
                    SERVICE_VERSION: self.service_version,
                    "deployment.environment": self.environment,
                }
            ),
            sampler=ParentBased(TraceIdRatioBased(sample_rate)),
        )
        if span_exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(span_exporter))
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider
        logger.info(
            "Telemetry started: service=%s exporter=%s sample_rate=%s",
            self.service_name,
            exporter,
            sample_rate,
        )
        return True

    def instrument(self, app: FastAPI, *, redis_enabled: bool = False) -> None:
        """Instrument incoming requests, log records and (optionally) Redis calls."""
        if not self.active:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls=_UNTRACED_URLS
            )
        except Exception:
            logger.exception("FastAPI instrumentation failed; request spans disabled")
        LoggingInstrumentor().instrument(
            tracer_provider=self.tracer_provider, set_logging_format=False
        )
        if redis_enabled:
            RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)
            self._instrumented_redis = True

    def shutdown(self) -> None:
        """Undo instrumentation and flush spans still buffered for export."""
        if not self.active:
            return
        LoggingInstrumentor().uninstrument()
        if self._instrumented_redis:
            RedisInstrumentor().uninstrument()
        self.tracer_provider.shutdown()
        self.tracer_provider = None
        logger.info("Telemetry shut down")


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the process-wide telemetry instance (set at startup)."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Register (or clear, with None) the process-wide telemetry instance."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
