"""Logging setup shared by the scorer diagnostics and the audit trail.

loguru carries scorer diagnostics; structlog carries audit events (see
spam_defense.utils.logging). Both follow one level and one format:
"json" lines for production, colorized "console" output on a terminal.

At import, level and format come from SPAM_DEFENSE_LOG_LEVEL and
SPAM_DEFENSE_LOG_FORMAT. load_config() re-applies them from the validated
Settings, so an invalid value is reported as ConfigInvalid there.
"""

import os
import sys
from typing import Optional

from loguru import logger

from spam_defense.config.defaults import DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL, LOG_LEVELS
from spam_defense.utils.logging import configure_structured_logging

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Point loguru and structlog at the same level and format.

    Args:
        level: Level name; SPAM_DEFENSE_LOG_LEVEL or INFO when None
        log_format: "json" or "console"; SPAM_DEFENSE_LOG_FORMAT or json when None
    """
    level = (level or os.getenv("SPAM_DEFENSE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    if level not in LOG_LEVELS:
        level = DEFAULT_LOG_LEVEL
    log_format = (log_format or os.getenv("SPAM_DEFENSE_LOG_FORMAT") or DEFAULT_LOG_FORMAT).lower()
    console = log_format == "console" and sys.stderr.isatty()

    logger.remove()
    logger.configure(extra={"component": "spam_defense"})
    if console:
        logger.add(sys.stderr, format=_CONSOLE_FORMAT, level=level, colorize=True)
    else:
        logger.add(sys.stdout, format="{message}", level=level, serialize=True, diagnose=False)

    configure_structured_logging(level, console)


def get_logger(component: str):
    """Loguru logger bound to a component name, e.g. get_logger("UserReputationScorer")."""
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
