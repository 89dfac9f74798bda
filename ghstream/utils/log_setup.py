"""
Logging setup for the command line

Library modules only create module loggers; handlers are attached here,
by the CLI, so embedding applications keep control of logging.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def map_log_level(level_name: str) -> int:
    """
    Convert a level name to a logging level

    Args:
        level_name: ERROR|WARN|WARNING|INFO|DEBUG (case-insensitive)

    Returns:
        logging level constant
    """
    value = (level_name or "").strip().upper()
    if value == "ERROR":
        return logging.ERROR
    if value in ("WARN", "WARNING"):
        return logging.WARNING
    if value == "INFO":
        return logging.INFO
    if value == "DEBUG":
        return logging.DEBUG
    raise ValueError(f"Unsupported log level: {level_name}")


def configure_logging(level_name: str = "WARNING") -> logging.Logger:
    """
    Attach a single stderr handler to the package logger

    Calling this more than once replaces the handler instead of stacking them.

    Args:
        level_name: Level name accepted by map_log_level()

    Returns:
        The configured ``ghstream`` logger
    """
    level = map_log_level(level_name)

    logger = logging.getLogger("ghstream")
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    logger.addHandler(handler)

    return logger
