"""Centralized logging helpers.

Buildpack output is read in the platform's staging log, so records are
formatted with the conventional step/indent markers instead of timestamps.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

STEP_PREFIX = "-----> "


class BuildpackFormatter(logging.Formatter):
    """Render records the way staging logs expect them."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if getattr(record, "step", False):
            return f"{STEP_PREFIX}{message}"
        if record.levelno >= logging.ERROR:
            return f"{Constants.OUTPUT_INDENT}**ERROR** {message}"
        if record.levelno >= logging.WARNING:
            return f"{Constants.OUTPUT_INDENT}**WARNING** {message}"
        if record.levelno <= logging.DEBUG:
            return f"DEBUG: {message}"
        return f"{Constants.OUTPUT_INDENT}{message}"


def _level_from_env() -> int:
    name = os.environ.get(Constants.ENV_LOG_LEVEL)
    if name:
        return getattr(logging, name.upper(), logging.INFO)
    if os.environ.get(Constants.ENV_DEBUG):
        return logging.DEBUG
    return logging.INFO


def configure_logging(log_file: Optional[str] = None) -> None:
    """Install the buildpack handler on the root logger.

    Safe to call more than once; existing handlers are replaced.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(BuildpackFormatter())
    root.addHandler(stream)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(_level_from_env())


def begin_step(logger: logging.Logger, msg: str, *args: Any) -> None:
    """Log a top-level staging step."""
    logger.info(msg, *args, extra={"step": True})


def is_debug_enabled(logger: logging.Logger) -> bool:
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured debug records.

    None values are dropped so formatters never see half-filled fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip credentials and query strings from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<unparseable url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.monotonic()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)
