"""Logging infrastructure for the converter.

Provides configurable levels and per-component correlation: while a
component is being converted its LCSC id is attached to every log record,
which keeps interleaved output from parallel batch workers readable.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

# LCSC id of the component the current thread is converting
component_ctx: ContextVar[str | None] = ContextVar("component", default=None)


def get_component_id() -> str | None:
    """Get the LCSC id of the component being converted, if any."""
    return component_ctx.get()


@contextmanager
def component_context(lcsc_id: str) -> Iterator[None]:
    """Tag all log records emitted inside the block with ``lcsc_id``."""
    token = component_ctx.set(lcsc_id)
    try:
        yield
    finally:
        component_ctx.reset(token)


class ComponentFilter(logging.Filter):
    """Stamp the current component id onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = get_component_id() or "-"
        return True


def setup_logging(
    level: int | str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Configure logging for the application.

    Args:
        level: Logging level (e.g., 'DEBUG', 'INFO', 'ERROR').
               Defaults to LOGGING_LEVEL env var or 'INFO'.
        format_string: Custom log format string. Defaults to a structured format.

    Returns:
        The root logger configured for the application.
    """
    if level is None:
        level = os.environ.get("LOGGING_LEVEL", "INFO")

    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] [%(name)s] [component=%(component)s] %(message)s"

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    console_handler.addFilter(ComponentFilter())
    logger.addHandler(console_handler)

    # Disable noisy third-party loggers
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel("WARNING")
        logging.getLogger(noisy).propagate = False

    return logger


class ComponentLoggerAdapter(logging.LoggerAdapter[Any]):
    """Logger adapter that adds the component id to log records."""

    def process(self, msg: str, kwargs: Any) -> tuple[str, Any]:
        extra = kwargs.get("extra")
        if extra is None:
            extra = {}
        component = get_component_id()
        if component is not None:
            extra["component"] = component
        kwargs["extra"] = extra
        return msg, kwargs


def create_logger(name: str) -> ComponentLoggerAdapter:
    """Create and return a logger for a module.

    Args:
        name: The module name (typically __name__).

    Returns:
        A configured logger instance.
    """
    return ComponentLoggerAdapter(logging.getLogger(name), {})
