"""Queue entries and status snapshots."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")

Request = Callable[[], Awaitable[T]]


@dataclass(frozen=True, slots=True)
class QueueItem(Generic[T]):
    """A waiting request paired with the future its caller is awaiting."""

    request: Request[T]
    future: asyncio.Future[T]

    def resolve(self, value: T) -> None:
        # The caller may have stopped waiting; the result is then discarded.
        if not self.future.done():
            self.future.set_result(value)

    def reject(self, error: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(error)

    def cancel(self) -> None:
        self.future.cancel()


@dataclass(frozen=True, slots=True)
class LimiterStatus:
    """Point-in-time view of the limiter."""

    queue_size: int
    available_requests: int
    mps_counter: int
    mpm_counter: int
