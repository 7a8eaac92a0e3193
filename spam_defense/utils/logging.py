"""Audit trail output through structlog.

configure_structured_logging() is driven by
spam_defense.config.logging.configure_logging, which keeps it on the same
level and format as the loguru diagnostics.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars


def configure_structured_logging(level: str = "INFO", console: bool = False) -> None:
    """
    Configure structlog for audit events.

    Args:
        level: Minimum level name
        console: Colorized key=value lines instead of JSON
    """
    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if console
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def get_structured_logger(name: str, component: str) -> Any:
    """Lazy structlog logger bound to a component; resolves the current configuration on each call."""
    return structlog.get_logger(name, component=component)


class StructlogAuditSink:
    """Default AuditLogSink writing audit events through structlog."""

    def __init__(self, name: str = "spam_defense.audit") -> None:
        self._logger = get_structured_logger(name, component="audit")

    def info(self, event: str, **fields: Any) -> None:
        self._logger.info(event, **fields)


__all__ = [
    "StructlogAuditSink",
    "get_structured_logger",
    "configure_structured_logging",
]
