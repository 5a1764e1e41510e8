"""Logging setup shared by the app and its services."""

import sys
from loguru import logger

from src import config

_logger_configured: bool = False


def configure_logging(level: str = None):
    """Replace loguru's default sink with a single stderr sink."""
    global _logger_configured

    if _logger_configured:
        return logger

    logger.remove()
    logger.add(
        sys.stderr,
        level=level or config.LOG_LEVEL,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | <level>{message}</level>",
        colorize=True,
    )
    _logger_configured = True
    return logger


__all__ = ["logger", "configure_logging"]
