"""Redis cache for approval configuration records.

Flow definitions, position levels and function display names change rarely
and are read on every resolution, so they are kept here between requests
with per-kind TTLs. Approval state and directory users are never stored.

The cache is strictly optional: every operation degrades to a miss or no-op
when Redis is unreachable, after one reconnect attempt.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from hse_approvals.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Async JSON cache over redis.asyncio.

    Call connect() at startup and disconnect() at shutdown; a client passed
    in (tests, DI) is treated as already connected.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    def _new_client(self) -> redis.Redis:
        password = self.settings.redis_password
        return redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=self.settings.store_read_timeout_seconds,
            socket_keepalive=True,
            max_connections=self.settings.redis_max_connections,
        )

    async def connect(self) -> None:
        if self.redis is not None:
            return
        client = self._new_client()
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache connected: %s:%s/%s",
            self.settings.redis_host,
            self.settings.redis_port,
            self.settings.redis_db,
        )

    async def disconnect(self) -> None:
        if self.redis is None:
            return
        await self.redis.aclose()
        self.redis = None
        self._connected = False
        logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    async def _reconnect(self) -> bool:
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis connection")
        self.redis = None
        self._connected = False
        await self.connect()
        return self.is_available()

    async def _run(
        self,
        op: str,
        key: str,
        command: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run command; on a dropped connection reconnect and retry once."""
        if not self.is_available():
            return default
        try:
            return await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if not await self._reconnect():
                logger.warning("Cache %s skipped for %s (Redis disconnected)", op, key)
                return default
        except redis.RedisError:
            logger.exception("Cache %s error for %s", op, key)
            return default
        try:
            return await command(self.redis)
        except redis.RedisError:
            logger.exception("Cache %s error for %s after reconnect", op, key)
            return default

    async def get(self, key: str) -> Any | None:
        """JSON-decoded value, or None on a miss or when Redis is unavailable."""
        raw = await self._run("get", key, lambda r: r.get(key), None)
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            await self.delete(key)
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value (JSON-serializable) for ttl seconds."""
        payload = json.dumps(value)

        async def setex(r: redis.Redis) -> bool:
            await r.setex(key, ttl, payload)
            return True

        stored = await self._run("set", key, setex, False)
        if stored:
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return stored

    async def delete(self, key: str) -> bool:
        async def delete(r: redis.Redis) -> bool:
            await r.delete(key)
            return True

        return await self._run("delete", key, delete, False)
