"""Timeout-bounded, failure-tolerant store reads for one resolution call.

Every read the resolver performs goes through LookupGuard.run: a failing or
slow lookup is logged, noted on the current span and recorded by name, and
the caller receives its fallback instead of an exception. Cancellation is
never absorbed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from hse_approvals.domain.exceptions import StoreUnavailableError
from hse_approvals.shared.telemetry.logging import get_logger
from hse_approvals.shared.telemetry.tracing import add_span_event

logger = get_logger(__name__)

T = TypeVar("T")


class LookupGuard:
    """Runs lookups with a per-call timeout; collects the names of degraded ones."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        self._degraded: list[str] = []

    @property
    def degraded(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self._degraded))

    async def run(
        self,
        name: str,
        lookup: Callable[[], Awaitable[T]],
        fallback: T,
    ) -> T:
        try:
            return await asyncio.wait_for(lookup(), timeout=self.timeout)
        except TimeoutError:
            logger.warning("Lookup %s timed out after %ss", name, self.timeout)
            self._record(name, "timeout")
        except StoreUnavailableError as e:
            logger.warning("Lookup %s failed: %s", name, e.message)
            self._record(name, "store_unavailable")
        except Exception:
            logger.warning("Lookup %s raised unexpectedly", name, exc_info=True)
            self._record(name, "error")
        return fallback

    def _record(self, name: str, reason: str) -> None:
        self._degraded.append(name)
        add_span_event("approval.lookup_degraded", {"lookup": name, "reason": reason})
