"""Limiter configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import InvalidOptionsError

ENV_PREFIX = "APITHROTTLE_"

DEFAULT_MAX_PER_SECOND = 100
DEFAULT_MAX_PER_MINUTE = 1000
DEFAULT_MAX_QUEUE_SIZE = 10000
DEFAULT_PROCESS_INTERVAL = 1.0  # seconds


@dataclass(frozen=True, slots=True)
class LimiterOptions:
    """Immutable limiter settings, validated on construction."""

    max_per_second: int = DEFAULT_MAX_PER_SECOND
    max_per_minute: int = DEFAULT_MAX_PER_MINUTE
    max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE
    process_interval: float = DEFAULT_PROCESS_INTERVAL
    reserve_headroom: bool = False

    def __post_init__(self) -> None:
        for name in ("max_per_second", "max_per_minute", "max_queue_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidOptionsError(f"{name} must be an integer, got {value!r}")
        if isinstance(self.process_interval, bool) or not isinstance(self.process_interval, (int, float)):
            raise InvalidOptionsError(f"process_interval must be a number, got {self.process_interval!r}")
        if self.max_per_second <= 0:
            raise InvalidOptionsError("max_per_second must be positive")
        if self.max_per_minute <= 0:
            raise InvalidOptionsError("max_per_minute must be positive")
        if self.max_per_second > self.max_per_minute:
            raise InvalidOptionsError("max_per_second cannot exceed max_per_minute")
        if self.max_queue_size <= 0:
            raise InvalidOptionsError("max_queue_size must be positive")
        if self.process_interval <= 0:
            raise InvalidOptionsError("process_interval must be positive")
        if self.reserve_headroom and self.queue_capacity <= 0:
            raise InvalidOptionsError("max_queue_size leaves no room after reserving headroom")

    @property
    def queue_capacity(self) -> int:
        """Number of waiting requests accepted before admission is refused."""

        if self.reserve_headroom:
            return self.max_queue_size - self.max_per_second - 1
        return self.max_queue_size

    @classmethod
    def load(cls, override: Optional[Mapping[str, Any]] = None) -> "LimiterOptions":
        """Build options from ``APITHROTTLE_*`` variables, applying overrides."""

        data = _options_from_environment()
        if override:
            data.update(override)
        return cls(**data)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


_PARSERS: Dict[str, Callable[[str], Any]] = {
    "max_per_second": int,
    "max_per_minute": int,
    "max_queue_size": int,
    "process_interval": float,
    "reserve_headroom": _parse_bool,
}


def _options_from_environment() -> Dict[str, Any]:
    env = os.environ
    data: Dict[str, Any] = {}
    for option in fields(LimiterOptions):
        key = ENV_PREFIX + option.name.upper()
        raw = env.get(key)
        if raw is None or not raw.strip():
            continue
        try:
            data[option.name] = _PARSERS[option.name](raw.strip())
        except ValueError as exc:
            raise InvalidOptionsError(f"{key}={raw!r} ({exc})") from exc
    return data
