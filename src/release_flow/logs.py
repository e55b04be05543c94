"""Structured logging setup.

Modules log through ``structlog.get_logger(__name__)`` with key/value
fields. ``configure_logging`` is called once by the CLI before a pipeline
runs and routes everything to stderr through the console renderer.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Above CRITICAL, so nothing gets through
SILENT = logging.CRITICAL + 10


def resolve_level(debug: bool = False, silent: bool = False) -> int:
    if silent:
        return SILENT
    if debug:
        return logging.DEBUG
    return logging.INFO


def configure_logging(debug: bool = False, silent: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        debug: Emit debug records (commands run, intermediate values)
        silent: Suppress all log output; takes precedence over ``debug``
    """
    level = resolve_level(debug, silent)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )
