"""Structured logging configuration for Reindexer."""

import logging
import sys
from typing import Any

import structlog

# Loggers that log every request at INFO and would drown the per-URL events
NOISY_LOGGERS = ("httpx", "httpcore", "google.auth", "urllib3")


def setup_logging(log_level: str = "WARNING", json_logs: bool | None = None) -> None:
    """Configure structured logging for a CLI run.

    Events go to stderr so the submission report on stdout stays readable.
    An interactive terminal gets key=value console output; anything else
    (cron, CI, redirected stderr) gets one JSON object per line.

    Args:
        log_level: Logging level name, already validated by Settings.
        json_logs: Force JSON (True) or console (False) output. None picks
            based on whether stderr is a terminal.
    """
    level = logging.getLevelName(log_level.upper())
    if json_logs is None:
        json_logs = not sys.stderr.isatty()

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Note: Returns Any because structlog.get_logger() returns a dynamically
    configured logger type that varies based on setup_logging() configuration.
    """
    return structlog.get_logger(name)
