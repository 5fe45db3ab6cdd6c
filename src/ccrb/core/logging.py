"""Logging configuration utilities."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def resolve_level(name: str | int) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, *, json_output: bool | None = None) -> None:
    """Route structlog through stdlib logging on stderr.

    JSON lines are emitted unless stderr is a terminal, where the console
    renderer is easier to follow during a manual run.
    """

    level = resolve_level(level)
    if json_output is None:
        json_output = not sys.stderr.isatty()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ]
    )

    # stdout is reserved for `ccrb decode` output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def bind_run_context(**values: Any) -> None:
    """Attach ``values`` to every log event of the current run."""

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def get_logger(name: str) -> structlog.stdlib.BoundLogger[Any]:
    """Return a configured structlog logger."""

    return structlog.get_logger(name)
