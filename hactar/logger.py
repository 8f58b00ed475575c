#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Console logger for hactar commands.

Each level prints a short emoji prefix and a rich style. Debug output
is only shown when HACTAR_DEBUG is set.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.status import Status

LEVEL_PREFIXES = {
    "info": ("ℹ️ ", None),
    "results": ("🎯", "bold cyan"),
    "success": ("✅", "green"),
    "warning": ("⚠️ ", "yellow"),
    "error": ("❌", "red"),
    "debug": ("🔍", "dim"),
}


class Logger:
    """Leveled console output built on rich."""

    def __init__(
        self,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
        debug: Optional[bool] = None,
    ) -> None:
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        if debug is None:
            debug = bool(os.environ.get("HACTAR_DEBUG"))
        self.debug_enabled = debug

    def _emit(self, level: str, message: str, console: Optional[Console] = None) -> None:
        prefix, style = LEVEL_PREFIXES[level]
        (console or self.console).print(f"{prefix} {message}", style=style, markup=False)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def results(self, message: str) -> None:
        self._emit("results", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message, self.error_console)

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self._emit("debug", message)

    def line(self, message: str = "") -> None:
        """Print a plain line without prefix."""
        self.console.print(message, markup=False, highlight=False)

    @contextmanager
    def status(self, message: str) -> Iterator[Status]:
        """Show a spinner while a long running step executes.

        Yields the rich Status so the caller can update its text.
        """
        with self.console.status(message) as spinner:
            yield spinner


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def reset_logger() -> None:
    """Drop the cached logger so the next get_logger() re-reads the environment."""
    global _logger
    _logger = None
