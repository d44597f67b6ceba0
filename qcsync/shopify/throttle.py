"""
FIFO gate that spaces out Shopify Admin API calls.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class RateLimiter:
    """
    Serializes calls in arrival order with a minimum gap between them.

    Each slot is held while its call runs and released ``min_gap`` seconds
    after the call completes. The caller is not kept waiting for the gap;
    only the next caller in line is.
    """

    DEFAULT_MIN_GAP = 0.4  # seconds

    def __init__(self, min_gap: float = DEFAULT_MIN_GAP):
        if min_gap < 0:
            raise ValueError("min_gap must be >= 0")
        self.min_gap = min_gap
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """True while a call is running or its gap has not elapsed."""
        return self._lock.locked()

    def _release(self) -> None:
        self._lock.release()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Wait for this caller's turn, then hold the gate for one call."""
        loop = asyncio.get_running_loop()
        await self._lock.acquire()
        try:
            yield
        finally:
            if self.min_gap > 0:
                loop.call_later(self.min_gap, self._release)
            else:
                self._release()
