"""Sliding-window rate limiting for upstream model calls.

The limiter is a throttle: callers over the quota are delayed until the
oldest admitted request leaves the window, never rejected.
"""

import asyncio
import time
from collections import deque
from typing import Awaitable, Callable

from ..exceptions import RateLimiterError
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_WINDOW_MS = 60_000


class RateLimiter:
    """Admits at most ``max_requests`` calls per sliding ``window_ms`` window.

    Admission is serialized with an asyncio lock, so concurrent callers are
    admitted in arrival order and the window is never over-filled.

    Example:
        limiter = RateLimiter(max_requests=50)
        await limiter.acquire()  # returns immediately until the quota is used
    """

    def __init__(
        self,
        max_requests: int,
        window_ms: int = DEFAULT_WINDOW_MS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        max_wait_cycles: int = 1000,
    ):
        """Initialize the limiter.

        Args:
            max_requests: Requests admitted per window. Must be at least 1.
            window_ms: Window length in milliseconds.
            clock: Monotonic clock returning seconds.
            sleep: Coroutine used to suspend a caller.
            max_wait_cycles: Upper bound on wait-and-recheck rounds per acquire.

        Raises:
            ValueError: If max_requests < 1 or window_ms <= 0
        """
        if max_requests < 1:
            raise ValueError(f"max_requests must be at least 1, got {max_requests}")
        if window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {window_ms}")

        self.max_requests = max_requests
        self.window_ms = window_ms
        self._clock = clock
        self._sleep = sleep
        self._max_wait_cycles = max_wait_cycles
        self._requests: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def _window(self) -> float:
        return self.window_ms / 1000.0

    def _prune(self, now: float) -> None:
        while self._requests and now - self._requests[0] >= self._window:
            self._requests.popleft()

    async def acquire(self) -> None:
        """Wait until a request may be sent, then record it.

        Raises:
            RateLimiterError: If admission is still refused after
                max_wait_cycles waits
        """
        async with self._lock:
            for _ in range(self._max_wait_cycles):
                now = self._clock()
                self._prune(now)

                if len(self._requests) < self.max_requests:
                    self._requests.append(now)
                    return

                wait = self._window - (now - self._requests[0])
                logger.debug(
                    f"rate limit reached ({len(self._requests)}/{self.max_requests}), "
                    f"waiting {wait:.3f}s"
                )
                await self._sleep(wait)

        raise RateLimiterError(self._max_wait_cycles)

    def stats(self) -> dict[str, int]:
        """Return current usage of the window."""
        self._prune(self._clock())
        return {
            "current": len(self._requests),
            "max": self.max_requests,
            "window_ms": self.window_ms,
        }
