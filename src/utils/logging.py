"""structlog configuration for the API server and the CLI.

Every module logs through ``get_logger(__name__)`` with snake_case event
names and keyword context, e.g.::

    _logger.info("genius_request", endpoint="/songs/42", attempt=1)

Two renderers share one processor chain: a coloured console renderer for
development and JSON lines for production.  Standard-library loggers
(uvicorn, httpx) are routed through the same chain so their output lines
up with ours.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Libraries that log every HTTP exchange at INFO; the transport already
# emits ``genius_request`` for each call.
_CHATTY_LIBRARIES = ("httpx", "httpcore")


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and stdlib logging.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON lines instead of coloured console output.
        stream: Destination; stdout when omitted.  The CLI passes stderr so
            stdout carries only the report.

    Returns:
        The root structlog logger.
    """
    stream = stream or sys.stdout
    level = logging.getLevelName(log_level.upper())

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=stream.isatty())
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to *name*, configuring defaults first if needed."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
