"""Client-side rate limiting for the translation provider.

The provider enforces an undocumented quota, so every outbound call waits
for a minimum interval since the previous one. Clock and sleep are injected
so the delays can be checked without wall-clock time.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class MinIntervalRateLimiter:
    """Leaky bucket of capacity one: at most one grant per `min_interval_seconds`."""

    def __init__(
        self,
        min_interval_seconds: float,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        self.min_interval_seconds = min_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_grant: float | None = None
        self.total_waited = 0.0
        self.grants = 0

    async def acquire(self) -> None:
        if self._last_grant is not None and self.min_interval_seconds > 0:
            elapsed = self._clock() - self._last_grant
            remaining = self.min_interval_seconds - elapsed
            if remaining > 0:
                await self._sleep(remaining)
                self.total_waited += remaining
        self._last_grant = self._clock()
        self.grants += 1
