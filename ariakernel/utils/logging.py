"""Simple logging utilities for ariakernel."""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name."""
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Point the package logger at stderr with the given level name."""
    logger = get_logger("ariakernel")
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(numeric)
    for handler in logger.handlers:
        handler.setLevel(numeric)
    return logger
