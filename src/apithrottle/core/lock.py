"""Cooperative mutual exclusion for the limiter's shared state."""

from __future__ import annotations

import asyncio
from typing import Callable


class AsyncLock:
    """FIFO lock for coroutines running on one event loop.

    ``acquire`` resolves with the release callable once the caller holds the
    lock. Waiters are granted the lock in the order they asked for it. There
    is no timeout, and releasing twice is an error.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def acquire(self) -> Callable[[], None]:
        await self._lock.acquire()
        return self._lock.release

    async def __aenter__(self) -> "AsyncLock":
        await self._lock.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._lock.release()
