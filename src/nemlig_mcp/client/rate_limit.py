"""
Token-bucket rate limiter for outbound Nemlig requests
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class RateLimiter:
    """Delays callers so that at most requests_per_second calls go out.

    The bucket starts full with burst_size tokens, so that many calls pass
    immediately; after that each call waits for the next token, one every
    1/requests_per_second seconds. acquire() never rejects a caller.
    Admission is serialized by an asyncio.Lock, which wakes waiters in
    arrival order.
    """

    def __init__(
        self,
        requests_per_second: float = 1,
        burst_size: int = 2,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be greater than 0")
        if burst_size < 1:
            raise ValueError("burst_size must be at least 1")

        self.requests_per_second = requests_per_second
        self.burst_size = burst_size
        self.interval = 1.0 / requests_per_second
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(burst_size)
        self._updated_at: Optional[float] = None
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = self._clock()
        if self._updated_at is not None:
            elapsed = max(0.0, now - self._updated_at)
            self._tokens = min(float(self.burst_size), self._tokens + elapsed / self.interval)
        self._updated_at = now

    async def acquire(self) -> None:
        async with self._lock:
            self._refill()
            if self._tokens < 1:
                await self._sleep((1 - self._tokens) * self.interval)
                self._refill()
                # sleep() may wake a hair early; the slot is ours either way
                self._tokens = max(self._tokens, 1.0)
            self._tokens -= 1
