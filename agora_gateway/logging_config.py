"""Structlog configuration for the gateway process."""

import logging
import sys

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import Processor


def configure_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog and the stdlib root logger.

    Logs go to stderr so stdout stays free for protocol output.

    Args:
        log_level: Minimum level name (e.g. "INFO", "DEBUG").
        log_format: "json" for JSON lines, anything else for console output.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors: list[Processor] = [
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if log_format.lower() == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s", force=True)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
