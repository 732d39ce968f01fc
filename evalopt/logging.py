"""Logging utilities for evalopt.

Every algorithm reports its per-iteration diagnostics through a logger
obtained here. Output goes to stderr. The algorithm loggers are created at
INFO so their diagnostics show by default; other loggers start at WARNING.
:func:`set_log_level` and :func:`configure_logging` apply one level to all
of them, e.g. ``set_log_level("WARNING")`` silences the diagnostics.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Module-level logger cache
_loggers: dict[str, logging.Logger] = {}


def _as_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(
    name: Optional[str] = None, level: Optional[int | str] = None
) -> logging.Logger:
    """Get or create a logger for the given module name.

    Loggers are cached to avoid duplicate handlers. The logger name should
    typically be `__name__` from the calling module.

    Args:
        name: Logger name (typically `__name__`). If None, returns the
            package logger.
        level: Initial level of a newly created logger. If None, uses the
            current default level. Ignored for cached loggers.

    Returns:
        Configured logger instance.

    Example:
        >>> from evalopt.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Starting Adam")
    """
    if name is None:
        name = "evalopt"

    if name == "evalopt" or name.startswith("evalopt."):
        logger_name = name
    else:
        logger_name = f"evalopt.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    # Only configure if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        initial = _DEFAULT_LEVEL if level is None else _as_level(level)
        logger.setLevel(initial)

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(initial)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the logging level for all evalopt loggers.

    Args:
        level: Logging level (logging.DEBUG, logging.INFO, etc.) or string
            ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').

    Example:
        >>> from evalopt.logging import set_log_level
        >>> set_log_level("INFO")  # show iteration diagnostics
    """
    level = _as_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Configure logging for evalopt.

    Replaces the handlers of every cached logger with a single stream
    handler. It should typically be called once at application startup.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses default.
        stream: Output stream (default: sys.stderr).
    """
    level = _as_level(level)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


__all__ = ["configure_logging", "get_logger", "set_log_level"]
