"""structlog wiring for scripts and long-running processes using the client."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# httpx and httpcore log every request at INFO; our own api_request_* events cover that
NOISY_LOGGERS = ("httpx", "httpcore")


def _renderer(json: bool) -> structlog.types.Processor:
    if json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(*, json: bool = False, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route structlog events through one stdlib handler on *stream*.

    Output goes to stderr unless *stream* is given, so command output on
    stdout stays machine-readable.  *json* switches from the console
    renderer to one JSON object per line.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json)],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
