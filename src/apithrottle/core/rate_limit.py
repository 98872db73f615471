"""Dual-window request throttle with a bounded waiting line."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Generic, List, Optional, Set, TypeVar

from .config import LimiterOptions
from .errors import QueueFullError
from .lock import AsyncLock
from .models import LimiterStatus, QueueItem, Request
from .reporting import ErrorHandler, log_request_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

SECONDS_PER_MINUTE = 60.0
SECOND_WINDOW = 1.0
# Timers may fire marginally before their deadline.
CLOCK_TOLERANCE = 1e-3


@dataclass(slots=True)
class WindowBudget:
    """Token budgets for the per-second and per-minute windows.

    The per-second budget is reset outright once a full second has passed
    since the last reset. The per-minute budget refills continuously in
    proportion to elapsed time and may hold a fraction of a token.
    """

    max_per_second: int
    max_per_minute: int
    per_second: int
    per_minute: float
    second_started: float
    last_refill: float

    @classmethod
    def full(cls, max_per_second: int, max_per_minute: int, now: float) -> "WindowBudget":
        return cls(
            max_per_second=max_per_second,
            max_per_minute=max_per_minute,
            per_second=max_per_second,
            per_minute=float(max_per_minute),
            second_started=now,
            last_refill=now,
        )

    def refill(self, now: float) -> None:
        if now - self.second_started >= SECOND_WINDOW - CLOCK_TOLERANCE:
            self.per_second = self.max_per_second
            self.second_started = now
        elapsed = max(now - self.last_refill, 0.0)
        self.per_minute = min(
            self.per_minute + elapsed / SECONDS_PER_MINUTE * self.max_per_minute,
            float(self.max_per_minute),
        )
        self.last_refill = now

    @property
    def available(self) -> int:
        return max(min(self.per_second, math.floor(self.per_minute)), 0)

    def consume(self, amount: int = 1) -> None:
        self.per_second -= amount
        self.per_minute -= amount


class ApiRateLimiter(Generic[T]):
    """Runs caller-supplied coroutines under per-second and per-minute caps.

    Every admitted request joins a bounded FIFO waiting line. Admission and a
    periodic drain timer both release as many waiting requests as the budgets
    allow. The timer is armed on demand and goes idle once the line is empty.
    All budget and queue bookkeeping happens under a single ``AsyncLock``.
    """

    def __init__(
        self,
        options: Optional[LimiterOptions] = None,
        error_handler: ErrorHandler = log_request_error,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._options = options or LimiterOptions()
        self._error_handler = error_handler
        self._clock = clock
        self._budget = WindowBudget.full(
            self._options.max_per_second, self._options.max_per_minute, clock()
        )
        self._queue: Deque[QueueItem[T]] = deque()
        self._lock = AsyncLock()
        self._timer: Optional[asyncio.Task[None]] = None
        self._inflight: Set[asyncio.Task[None]] = set()

    @property
    def options(self) -> LimiterOptions:
        return self._options

    @property
    def idle(self) -> bool:
        """True when no drain timer is armed."""

        return self._timer is None

    async def add_request(self, request: Request[T]) -> T:
        """Admit ``request`` and return its result once it has run.

        Raises ``QueueFullError`` without enqueuing when the waiting line is
        saturated. Failures raised by ``request`` are reported to the error
        handler and then re-raised here unchanged.
        """

        self._check_capacity()
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        async with self._lock:
            # Other submissions may have filled the line while we waited.
            self._check_capacity()
            self._queue.append(QueueItem(request, future))
            self._arm_timer()
            self._budget.refill(self._clock())
            batch = self._release_batch()
        self._launch(batch)
        return await future

    async def get_status(self) -> LimiterStatus:
        async with self._lock:
            return LimiterStatus(
                queue_size=len(self._queue),
                available_requests=self._budget.available,
                mps_counter=self._budget.per_second,
                mpm_counter=math.floor(self._budget.per_minute),
            )

    async def aclose(self) -> None:
        """Wait for the waiting line to drain and in-flight requests to settle.

        Admitted requests are never cancelled.
        """

        while self._timer is not None or self._inflight:
            if self._timer is not None:
                await self._timer
            if self._inflight:
                await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def __aenter__(self) -> "ApiRateLimiter[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _check_capacity(self) -> None:
        if len(self._queue) >= self._options.queue_capacity:
            raise QueueFullError(self._options.max_queue_size)

    def _arm_timer(self) -> None:
        if self._timer is None:
            logger.debug("Arming drain timer (interval %.3fs)", self._options.process_interval)
            self._timer = asyncio.create_task(self._run_timer())

    def _release_batch(self) -> List[QueueItem[T]]:
        # Caller holds the lock. Tokens are reserved as items leave the line.
        batch: List[QueueItem[T]] = []
        for _ in range(min(self._budget.available, len(self._queue))):
            batch.append(self._queue.popleft())
            self._budget.consume()
        return batch

    def _launch(self, batch: List[QueueItem[T]]) -> List[asyncio.Task[None]]:
        tasks = []
        for item in batch:
            task = asyncio.create_task(self._execute(item))
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            tasks.append(task)
        return tasks

    async def _execute(self, item: QueueItem[T]) -> None:
        try:
            result = await item.request()
        except asyncio.CancelledError:
            # Settle the caller before letting cancellation propagate.
            item.cancel()
            raise
        except Exception as exc:
            self._report(exc)
            item.reject(exc)
        else:
            item.resolve(result)

    def _report(self, error: Exception) -> None:
        try:
            self._error_handler(error)
        except Exception:
            logger.exception("Error handler failed while reporting %r", error)

    async def _run_timer(self) -> None:
        interval = self._options.process_interval
        while True:
            await asyncio.sleep(interval)
            if not await self._tick():
                logger.debug("Waiting line drained; drain timer idle")
                return

    async def _tick(self) -> bool:
        """Refill budgets and release waiting requests.

        Returns whether the timer should stay armed.
        """

        async with self._lock:
            self._budget.refill(self._clock())
            batch = self._release_batch()
        if batch:
            await asyncio.gather(*self._launch(batch), return_exceptions=True)
        async with self._lock:
            if self._queue:
                return True
            self._timer = None
            return False
