"""Sliding-window gate for outgoing Overpass requests.

Public Overpass mirrors throttle aggressive clients, so all requests from one
station source share a window of recent request timestamps.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allows at most `max_requests` acquisitions per `window_s` seconds."""

    def __init__(
        self,
        max_requests: int,
        window_s: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_s:
            self._timestamps.popleft()

    async def acquire(self) -> None:
        """Wait until a slot in the window is free, then take it."""

        async with self._lock:
            while True:
                now = self._clock()
                self._prune(now)
                if len(self._timestamps) < self.max_requests:
                    self._timestamps.append(now)
                    return

                wait_s = self.window_s - (now - self._timestamps[0])
                logger.debug("Overpass rate limit reached; waiting %.2fs", wait_s)
                await self._sleep(max(0.0, wait_s))

    @property
    def in_window(self) -> int:
        self._prune(self._clock())
        return len(self._timestamps)
