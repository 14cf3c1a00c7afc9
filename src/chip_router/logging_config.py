"""Logging infrastructure for the chip router.

Provides stderr logging with a configurable level (stdout carries the MCP
stdio transport) and tags every record with the chip currently being routed.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

# Name of the chip being routed, for correlating log lines across modules
chip_ctx: ContextVar[str | None] = ContextVar("chip", default=None)


def get_chip_name() -> str | None:
    """Get the name of the chip currently being routed, if any."""
    return chip_ctx.get()


def setup_logging(
    level: int | str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Configure logging for the application.

    Args:
        level: Logging level (e.g., 'DEBUG', 'INFO', 'ERROR').
               Defaults to LOGGING_LEVEL env var or 'INFO'.
        format_string: Custom log format string. Defaults to a format that
               includes the chip name.

    Returns:
        The root logger configured for the application.
    """
    if level is None:
        level = os.environ.get("LOGGING_LEVEL", "INFO")

    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] [%(name)s] [chip=%(chip)s] %(message)s"

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    console_handler.addFilter(_ChipFilter())
    logger.addHandler(console_handler)

    # FastMCP and its transport stack are chatty at INFO
    for noisy in ("fastmcp", "mcp", "asyncio"):
        logging.getLogger(noisy).setLevel("WARNING")

    return logger


class _ChipFilter(logging.Filter):
    """Guarantee a ``chip`` attribute on records from loggers outside the adapter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "chip"):
            record.chip = get_chip_name() or "-"
        return True


class ChipLoggerAdapter(logging.LoggerAdapter[Any]):
    """Logger adapter that adds the current chip name to log records."""

    def process(self, msg: str, kwargs: Any) -> tuple[str, Any]:
        extra = kwargs.get("extra")
        if extra is None:
            extra = {}
        extra.setdefault("chip", get_chip_name() or "-")
        kwargs["extra"] = extra
        return msg, kwargs


def create_logger(name: str) -> ChipLoggerAdapter:
    """Create a logger for a module.

    Args:
        name: The module name (typically __name__).

    Returns:
        A logger that tags records with the current chip.
    """
    return ChipLoggerAdapter(logging.getLogger(name), {})
