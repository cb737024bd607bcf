"""Logging setup for the service: a single stderr handler on the package logger."""
import logging
import sys
from typing import Optional

from .config import get_config

LOGGER_NAME = "tictactoe_sessions"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configures the package logger. Calling it again only updates the level."""
    if level is None:
        level = get_config().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    return logger
