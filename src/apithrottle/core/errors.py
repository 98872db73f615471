"""Exceptions raised by the limiter."""

from __future__ import annotations


class ThrottleError(Exception):
    """Base class for limiter errors."""


class InvalidOptionsError(ThrottleError, ValueError):
    """Raised when limiter options fail validation."""

    def __init__(self, reason: str = "") -> None:
        message = "Invalid options provided to the rate limiter"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.reason = reason


class QueueFullError(ThrottleError):
    """Raised when the waiting line cannot accept another request."""

    def __init__(self, max_queue_size: int) -> None:
        super().__init__(f"Rate limiter queue is full (max {max_queue_size})")
        self.max_queue_size = max_queue_size
