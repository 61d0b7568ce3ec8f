"""Structured logging configuration using structlog."""

import logging

import structlog
from rich.logging import RichHandler

from ..constants import CONSTANTS


def setup_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """Configure structured logging with Rich formatting.

    Args:
        verbose: Enable debug logging if True
        json_logs: Render events as JSON lines instead of console output
    """
    log_level = logging.DEBUG if verbose else getattr(logging, CONSTANTS.LOG_LEVEL, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
