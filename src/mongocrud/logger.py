"""
Logger module for mongocrud.

Provides the package logger so every module logs through the same channel,
and lets the application swap or tune it.
"""

import logging

LOGGER_NAME = "mongocrud"

# Module-level logger. Silent until the application configures logging.
logger: logging.Logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    return logger


def set_logger(custom_logger: logging.Logger) -> None:
    """Allow users to provide their own logger."""
    global logger
    logger = custom_logger


def set_log_level(level: int) -> None:
    """Set the logging level for the package.

    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, or logging.CRITICAL
    """
    logger.setLevel(level)
