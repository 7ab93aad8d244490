"""Async rate limiter: fixed gap between calls plus an optional per-minute window."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Gate outbound requests to a remote API.

    Two rules apply, whichever is stricter:

    * ``min_interval``: seconds that must pass after a request *completes*
      (and after it started) before the next one may start.
    * ``requests_per_minute``: sliding-window quota over request starts.

    ``clock`` and ``sleep`` are injectable so tests can drive a fake clock.

    Usage::

        limiter = RateLimiter(min_interval=0.5, name="serper")

        async with limiter:
            await make_request()
    """

    def __init__(
        self,
        min_interval: float = 0.0,
        requests_per_minute: Optional[int] = None,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._min_interval = max(0.0, min_interval)
        self._rpm = requests_per_minute
        self._name = name
        self._clock = clock
        self._sleep = sleep
        self._minute_window: list[float] = []
        self._last_mark: Optional[float] = None
        self._async_lock = asyncio.Lock()

    def _clean_window(self, now: float) -> None:
        """Remove expired timestamps from the sliding window."""
        self._minute_window = [t for t in self._minute_window if now - t < 60.0]

    def _wait_time(self) -> float:
        """Calculate how long to wait before the next request is allowed."""
        now = self._clock()
        wait = 0.0
        if self._last_mark is not None and self._min_interval:
            wait = self._min_interval - (now - self._last_mark)
        if self._rpm:
            self._clean_window(now)
            if len(self._minute_window) >= self._rpm:
                wait = max(wait, 60.0 - (now - self._minute_window[0]))
        return wait

    def _record(self) -> None:
        now = self._clock()
        self._last_mark = now
        if self._rpm:
            self._minute_window.append(now)

    async def acquire(self) -> None:
        """Wait until a request slot is available."""
        async with self._async_lock:
            while True:
                wait = self._wait_time()
                if wait <= 0:
                    break
                logger.debug("RateLimiter(%s) sleeping %.2fs", self._name, wait)
                await self._sleep(wait)
            self._record()

    def release(self) -> None:
        """Mark the end of a request; the gap is measured from here."""
        self._last_mark = self._clock()

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, *args):
        self.release()

    @property
    def requests_in_last_minute(self) -> int:
        """Number of requests started in the last 60 seconds (window mode only)."""
        self._clean_window(self._clock())
        return len(self._minute_window)
