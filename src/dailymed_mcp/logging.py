"""
Structured logging configuration using structlog.

Provides JSON-formatted logs for production and human-readable logs
for development. Everything is written to stderr: the MCP stdio
transport owns stdout.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from dailymed_mcp.config import settings


def configure_logging() -> None:
    """Configure structlog for the application."""

    is_dev = settings.environment == "development"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if is_dev:
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Standard library logging for third-party libs (mcp, httpx)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.getLevelName(settings.log_level.upper()),
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger instance with optional initial context.

    Args:
        name: Optional logger name (typically __name__)
        **initial_context: Key-value pairs to bind to all log messages

    Returns:
        Configured structlog logger

    Example:
        logger = get_logger(__name__, component="mappings")
        logger.info("mappings_loaded", rxnorm=1200)
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
