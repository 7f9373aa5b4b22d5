"""RateLimiter — global FIFO throttle for outbound detail calls.

The bucket holds ``count`` tokens.  A spent token comes back exactly
``period`` seconds after it was spent, so any window of ``period``
seconds contains at most ``count`` grants no matter how callers arrive.
Waiters are served strictly in arrival order.
"""

from __future__ import annotations

import asyncio
import collections
import logging
import time
from collections.abc import Awaitable, Callable

from pipewatch.core.errors import RateLimiterError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Asynchronous token bucket shared by every detail fetch.

    Parameters
    ----------
    count:
        Tokens available per period (also the burst size).
    period:
        Replenishment period in seconds.
    clock:
        Monotonic clock.  Injected in tests.
    sleep:
        Coroutine used to wait.  Injected in tests.
    """

    def __init__(
        self,
        count: int = 5,
        period: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if count < 1:
            raise ValueError("count must be at least 1")
        if period <= 0:
            raise ValueError("period must be positive")
        self._count = count
        self._period = period
        self._clock = clock
        self._sleep = sleep
        # Timestamps of the grants still inside the current window.
        self._grants: collections.deque[float] = collections.deque()
        self._lock = asyncio.Lock()

    @property
    def count(self) -> int:
        return self._count

    @property
    def period(self) -> float:
        return self._period

    @property
    def available(self) -> int:
        """Tokens that could be granted right now without waiting."""
        self._expire(self._clock())
        return self._count - len(self._grants)

    async def acquire(self) -> None:
        """Wait until a token is available, then spend it.

        Raises
        ------
        RateLimiterError
            If the clock or sleep primitive fails.
        """
        async with self._lock:
            try:
                now = self._clock()
                self._expire(now)
                while len(self._grants) >= self._count:
                    delay = self._grants[0] + self._period - now
                    logger.debug("Rate limit reached; waiting %.3fs", delay)
                    await self._sleep(delay)
                    now = self._clock()
                    self._expire(now)
                self._grants.append(now)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                raise RateLimiterError(f"Rate limiter failed: {exc}") from exc

    def _expire(self, now: float) -> None:
        while self._grants and now - self._grants[0] >= self._period:
            self._grants.popleft()
