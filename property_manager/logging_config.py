"""Structured logging configuration using structlog."""

import logging
import sys

import structlog

from property_manager.config import settings


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    Uses structlog with JSON or console output based on settings.LOG_FORMAT.
    Context bound through structlog.contextvars (account_id, user_id) is
    merged into every event.
    """
    if settings.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("receipt_processed", receipt_id=str(receipt.id))
    """
    return structlog.get_logger(name)
