"""Console reporting for failed requests."""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.markup import escape

ErrorHandler = Callable[[BaseException], None]

console = Console(stderr=True)


def log_request_error(error: BaseException) -> None:
    """Default error handler: print the failure to stderr."""

    console.print(f"[red]Request failed[/red]: {escape(repr(error))}")
