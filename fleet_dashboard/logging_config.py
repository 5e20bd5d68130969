"""
Logging configuration for the fleet dashboard backend.

Everything logs through `logging.getLogger(__name__)` under the
`fleet_dashboard` namespace; this module only decides where records go and
at which level.

Usage:
    from fleet_dashboard.logging_config import setup_logging
    setup_logging()  # once, at application startup

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)

Level guide:
    INFO   task lifecycle transitions, seeding, server start (ids only)
    DEBUG  decomposition internals, socket joins/leaves, request timing
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "INFO"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Chatty outside DEBUG: per-query SQL echo, per-request access lines
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx", "websockets")


def resolve_log_level(level: Optional[str] = None) -> str:
    """
    Normalise a level name, falling back to LOG_LEVEL and then INFO.

    Examples:
        resolve_log_level("debug") -> "DEBUG"
        resolve_log_level("verbose") -> "INFO"
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", DEFAULT_LEVEL)
    level = level.strip().upper()
    return level if level in VALID_LEVELS else DEFAULT_LEVEL


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Level name. If not provided, reads LOG_LEVEL; unknown
               names fall back to INFO.
    """
    level = resolve_log_level(level)
    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger("fleet_dashboard").setLevel(numeric_level)

    quiet_level = numeric_level if level == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(__name__).debug("Logging configured at %s level", level)
