"""Structured logging for drivepath using structlog.

Modules log through ``get_logger(__name__)`` with event-name messages and
key/value context. Nothing is configured on import: a host application that
already configures structlog or stdlib logging keeps full control. Hosts
that want drivepath's own output call ``setup_logging()``, which attaches a
single handler to the ``drivepath`` logger and leaves the root logger alone.
"""

from __future__ import annotations

import logging
from typing import Any, TextIO

import structlog

from drivepath.core.config import settings

PACKAGE_LOGGER = "drivepath"

# Shared by structlog events and plain stdlib records reaching the handler
_PRE_CHAIN: list[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route drivepath's log events to a stream.

    Safe to call more than once; the previous handler is replaced.

    Args:
        level: Minimum level name; defaults to ``settings.log_level``.
        json_output: One JSON object per line. Defaults to on unless
            ``settings.debug`` is set, in which case a console layout is used.
        stream: Where to write; defaults to stderr.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    if json_output is None:
        json_output = not settings.debug

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_PRE_CHAIN,
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers = [handler]
    package_logger.setLevel(log_level)
    package_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, normally the caller's ``__name__``.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)
