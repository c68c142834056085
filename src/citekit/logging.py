"""Logging configuration for citekit.

Rendering never raises on malformed paper or style data, so degradations
(missing paper ids, ordering fallbacks, orphan field codes) are reported
through these loggers instead.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

logger = logging.getLogger("citekit")

STANDARD_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def build_formatter(format_style: str = "standard") -> logging.Formatter:
    """Formatter for a format style name; unknown names use the standard format."""
    if format_style.lower() == "json":
        return JsonFormatter()
    return logging.Formatter(STANDARD_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: int | str = logging.WARNING,
    log_file: str | None = None,
    format_style: str = "standard",
) -> logging.Logger:
    """
    Configure the ``citekit`` logger.

    Records go to stderr, and also to ``log_file`` when one is given.
    Calling this again replaces the previous handlers.

    Args:
        level: Level number or name ("debug", "WARNING", ...)
        log_file: Optional file to append records to
        format_style: "standard" or "json"

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = build_formatter(format_style)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Args:
        name: Module name (e.g., "numbering", "importer")

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(f"citekit.{name}")


def _format_context(context: dict[str, Any] | None) -> str:
    if not context:
        return ""
    return "Context: " + ", ".join(f"{k}={v}" for k, v in context.items())


def log_failure(
    logger: logging.Logger,
    operation: str,
    error: Exception | str,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log a failure with structured context.

    Args:
        logger: Logger instance to use
        operation: Name of the operation that failed
        error: Exception or error message
        context: Additional context about the failure
        level: Logging level (default: ERROR)
    """
    error_type = type(error).__name__ if isinstance(error, Exception) else "Error"

    msg_parts = [f"{operation} failed: [{error_type}] {error}"]
    if context:
        msg_parts.append(_format_context(context))

    logger.log(level, " | ".join(msg_parts))


def log_warning(
    logger: logging.Logger,
    operation: str,
    message: str,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Log a warning with structured context.

    Args:
        logger: Logger instance to use
        operation: Name of the operation
        message: Warning message
        context: Additional context
    """
    msg_parts = [f"{operation}: {message}"]
    if context:
        msg_parts.append(_format_context(context))

    logger.warning(" | ".join(msg_parts))


# Initialize default logging (can be reconfigured by CLI or settings)
setup_logging(level=logging.WARNING)
