"""In-flight request tracking for graceful shutdown.

A ledger or lifecycle call that reached commit should finish before the
engine is disposed; the lifespan waits on the tracker for that.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.app.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    """Counts in-flight requests and signals when they have drained."""

    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._lock = asyncio.Lock()
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        async with self._lock:
            self._in_flight += 1
        try:
            yield
        finally:
            async with self._lock:
                self._in_flight -= 1
                if self._in_flight == 0 and self._shutting_down:
                    self._drained.set()

    async def start_shutdown(self) -> None:
        """Stop accepting work and arm the drain event."""
        self._shutting_down = True
        async with self._lock:
            logger.info("Shutdown started", in_flight=self._in_flight)
            if self._in_flight == 0:
                self._drained.set()

    async def wait_for_drain(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds; True if every request finished."""
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "Shutdown grace period elapsed",
                timeout_seconds=timeout,
                in_flight=self._in_flight,
            )
            return False
        logger.info("All requests drained")
        return True

    def reset(self) -> None:
        """Reset tracker state. For testing only."""
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()


request_tracker = RequestTracker()
