"""Logging setup for applications embedding the simulation."""

import logging

from .core.settings import Settings

LOGGER_NAME = "sparselife"


def configure_logging(settings: Settings) -> logging.Logger:
    """Set up the package logger.

    Args:
        settings: Settings whose `debug` flag selects the level

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if settings.debug else logging.WARNING)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
        logger.addHandler(handler)
    return logger
