"""
Logging utilities for lockkeeper.

This module centralizes logger configuration, formatting, and retrieval
for the lockkeeper package. Library code only ever calls
:func:`get_logger`; the CLI calls :func:`setup_logging` once per run.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from lockkeeper.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "lockkeeper"

_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Logging formatter with optional ANSI color support."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if self.use_color and self._should_use_color():
            color = self.COLORS.get(record.levelname)
            if color:
                # Work on a copy so other handlers see the plain level name
                record = logging.makeLogRecord(record.__dict__)
                record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)

    @staticmethod
    def _should_use_color() -> bool:
        """Determine whether ANSI colors should be emitted."""
        if os.environ.get("NO_COLOR"):
            return False
        if os.environ.get("CI"):
            return False
        try:
            return sys.stderr.isatty()
        except (AttributeError, OSError):
            return False


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure logging for lockkeeper.

    Safe to call multiple times; each call replaces the previous handler.

    Args:
        level: Logging level (e.g., ``logging.INFO``, ``logging.DEBUG``).
        verbose: Enable verbose formatting with timestamps.
        stream: Output stream; defaults to ``sys.stderr``.
    """

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)

        fmt = LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT
        formatter = ColoredFormatter(
            fmt,
            datefmt=LOG_DATE_FORMAT,
            use_color=not os.environ.get("NO_COLOR"),
        )
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the lockkeeper namespace.

    Args:
        name: Logger name, either relative (``"core.lockfile"``) or
            already qualified (``"lockkeeper.core.lockfile"``).

    Returns:
        A logger instance under the ``lockkeeper`` hierarchy.
    """
    if not name or name == ROOT_LOGGER_NAME:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
    elif name.startswith(f"{ROOT_LOGGER_NAME}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    # Library-safe behavior when logging is not configured
    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger
