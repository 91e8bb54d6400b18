"""Application lifespan: startup and shutdown of infrastructure.

Startup: logging, telemetry (if enabled), Realtime Database client, Redis
cache (if enabled). Shutdown runs in reverse. A missing database or an
unreachable Redis does not stop the app from starting: approval endpoints
answer 503 without a database, and resolution runs uncached without Redis.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from hse_approvals.core.config import Settings, get_settings
from hse_approvals.infrastructure.cache.redis_cache import CacheService
from hse_approvals.infrastructure.firebase.client import close_firebase, init_firebase
from hse_approvals.shared.telemetry.logging import setup_logging
from hse_approvals.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)

logger = logging.getLogger(__name__)


def _start_telemetry(app: FastAPI, settings: Settings) -> None:
    telemetry = TelemetryConfig.from_settings(settings)
    if not telemetry.start(
        exporter=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
        sample_rate=settings.telemetry_sample_rate,
    ):
        return
    telemetry.instrument(app, redis_enabled=settings.redis_enabled)
    set_telemetry(telemetry)


async def _connect_cache(settings: Settings) -> CacheService | None:
    if not settings.redis_enabled:
        return None
    cache = CacheService()
    await cache.connect()
    if not cache.is_available():
        logger.warning("Redis unavailable at startup; configuration reads are uncached")
    return cache


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    setup_logging()
    if settings.telemetry_enabled:
        _start_telemetry(app, settings)
    if not init_firebase():
        logger.warning("Approval data store unavailable; approval endpoints will answer 503")
    app.state.cache = await _connect_cache(settings)
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    if app.state.cache is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
    await close_firebase()
    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)
