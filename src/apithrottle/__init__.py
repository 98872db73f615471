"""In-process request throttle with per-second and per-minute ceilings."""

from .core import (
    ApiRateLimiter,
    InvalidOptionsError,
    LimiterOptions,
    LimiterStatus,
    QueueFullError,
    ThrottleError,
)

__all__ = [
    "ApiRateLimiter",
    "InvalidOptionsError",
    "LimiterOptions",
    "LimiterStatus",
    "QueueFullError",
    "ThrottleError",
]

__version__ = "0.1.0"
