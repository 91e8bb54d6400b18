"""Cache port used by the data source for configuration records."""

from __future__ import annotations

from typing import Any, Protocol


class ICacheService(Protocol):
    """JSON key/value store with TTLs; optional, and allowed to be down.

    Implementations answer a miss (None, False or 0) instead of raising when
    the backend is unreachable.
    """

    def is_available(self) -> bool: ...

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool: ...

    async def delete(self, key: str) -> bool: ...
