"""
Logging configuration for the Cortex service.
"""

import logging
import sys

LOGGER_NAME = "cortex"


def setup_logging(name: str = LOGGER_NAME, level: str = "INFO") -> logging.Logger:
    """Setup logging with proper format and handlers."""

    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def get_logger(suffix: str) -> logging.Logger:
    """Child logger, e.g. get_logger("ingestion") -> cortex.ingestion."""
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}")


# Global logger instance
logger = setup_logging()
