"""Core limiter, configuration and models."""

from .config import LimiterOptions
from .errors import InvalidOptionsError, QueueFullError, ThrottleError
from .lock import AsyncLock
from .models import LimiterStatus, QueueItem, Request
from .rate_limit import ApiRateLimiter, WindowBudget

__all__ = [
    "ApiRateLimiter",
    "AsyncLock",
    "InvalidOptionsError",
    "LimiterOptions",
    "LimiterStatus",
    "QueueFullError",
    "QueueItem",
    "Request",
    "ThrottleError",
    "WindowBudget",
]
