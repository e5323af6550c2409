"""Structured logging setup.

Library modules only call ``structlog.get_logger(__name__)``; applications
embedding the resolver call :func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from structlog.types import Processor

    from release_resolver.config.models import ResolverConfig


def configure_logging(
    level: str | None = None,
    json_output: bool = False,
    stream: TextIO | None = None,
    config: ResolverConfig | None = None,
) -> None:
    """Configure structlog for release-resolver.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR). Defaults
            to ``config.log_level``
        json_output: Render one JSON object per line instead of key=value text
        stream: Destination stream (defaults to stderr)
        config: Resolver configuration (defaults when omitted)
    """
    if level is None:
        if config is None:
            from release_resolver.config.models import ResolverConfig

            config = ResolverConfig()
        level = config.log_level
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
