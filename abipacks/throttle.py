"""Per-network request throttling for explorer APIs."""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from .models import RateLimitPolicy


class RateLimiter:
    """Bounds in-flight requests and spaces request starts for one network.

    Callers wait inside :meth:`slot` until both budgets allow a new request;
    nothing is ever rejected. Waiters are served in arrival order.
    """

    def __init__(
        self,
        policy: RateLimitPolicy,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.policy = policy
        self._clock = clock
        self._sleep = sleep
        self._semaphore = asyncio.Semaphore(max(1, policy.concurrent))
        self._start_lock = asyncio.Lock()
        self._next_start: float | None = None
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one request slot for the duration of the ``async with`` block."""
        async with self._semaphore:
            await self._wait_for_start()
            self._in_flight += 1
            try:
                yield
            finally:
                self._in_flight -= 1

    async def _wait_for_start(self) -> None:
        async with self._start_lock:
            now = self._clock()
            if self._next_start is not None and now < self._next_start:
                await self._sleep(self._next_start - now)
                now = max(self._clock(), self._next_start)
            self._next_start = now + self.policy.interval


__all__ = ["RateLimiter"]
