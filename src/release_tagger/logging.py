"""Typed logging for release-tagger.

The core never configures logging itself. Functions that report per-item
problems accept a ``log`` argument matching :class:`Logger`, defaulting
to a structlog logger from :func:`get_logger`. The CLI calls
:func:`configure_logging` once at startup; all log output goes to stderr
so stdout stays clean for piped output (``release-tagger changelog > NOTES.md``).

Usage:
    from release_tagger.logging import get_logger

    logger = get_logger(__name__)
    logger.info("previous_tag_resolved", tag="v1.2.0")
"""

from __future__ import annotations

import logging
import sys
from typing import Protocol, cast

import structlog


class Logger(Protocol):
    """Logging interface used throughout release-tagger.

    Matches the synchronous half of structlog's ``BoundLogger`` so any
    structlog logger, or a test double recording calls, can be injected.
    """

    def debug(self, event: str | None = None, **kw: object) -> None:
        """Log a debug message."""
        ...

    def info(self, event: str | None = None, **kw: object) -> None:
        """Log an info message."""
        ...

    def warning(self, event: str | None = None, **kw: object) -> None:
        """Log a warning message."""
        ...

    def error(self, event: str | None = None, **kw: object) -> None:
        """Log an error message."""
        ...


def get_logger(name: str) -> Logger:
    """Return a structlog logger bound to ``name``."""
    return cast(Logger, structlog.get_logger(name))


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Route structlog through the standard library logger on stderr.

    Args:
        verbose: Enable debug-level output
        quiet: Only show warnings and errors
        json_log: Render one JSON object per line instead of console output
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)
