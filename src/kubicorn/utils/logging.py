"""structlog configuration driven by the ``verbose`` and ``color`` options.

Verbosity follows the command line's integer scale::

    0  silent
    1  errors
    2  warnings
    3  info (default)
    4+ debug

structlog renders each event and hands it to the stdlib ``kubicorn``
logger, whose level implements the scale.  Log lines go to stderr so
that command output on stdout (for example ``kubicorn list --no-headers``
feeding shell completion) stays clean.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

DEFAULT_VERBOSITY: int = 3
LOGGER_NAME: str = "kubicorn"

SILENT: int = logging.CRITICAL + 10
"""Stdlib level above every emitted level; nothing passes it."""

_LEVELS: dict[int, int] = {
    0: SILENT,
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
}


def level_for_verbosity(verbosity: int) -> int:
    """Map the ``--verbose`` scale onto a stdlib logging level."""
    if verbosity <= 0:
        return _LEVELS[0]
    return _LEVELS.get(verbosity, logging.DEBUG)


def configure_logging(verbosity: int = DEFAULT_VERBOSITY, *, color: bool = True) -> None:
    """(Re)configure structlog and the ``kubicorn`` logger for this run.

    Safe to call more than once: loggers are not cached and the handler
    is replaced, so a later call (after options resolve) takes effect for
    module-level loggers too.
    """
    handler = logging.StreamHandler(sys.stderr)
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(level_for_verbosity(verbosity))
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=color),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger under the ``kubicorn`` namespace."""
    return structlog.get_logger(name or LOGGER_NAME, **initial_values)
