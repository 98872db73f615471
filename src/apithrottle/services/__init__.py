"""Adapters that route outbound calls through a limiter."""

from .http_client import ThrottledClient

__all__ = ["ThrottledClient"]
