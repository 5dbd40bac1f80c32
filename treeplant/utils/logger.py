"""
Logging utilities for the TreePlant API.
"""
import logging
import sys

from .config import Config


def get_logger(name):
    """
    Create and configure a logger with the given name.

    Args:
        name (str): The name for the logger.

    Returns:
        logging.Logger: Configured logger instance.
    """
    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(Config.LOG_LEVEL)

    # Modules may ask for the same logger more than once
    if logger.handlers:
        return logger

    # Create console handler and set level
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(Config.LOG_LEVEL)

    # Create formatter
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Add formatter to handler
    handler.setFormatter(formatter)

    # Add handler to logger
    logger.addHandler(handler)

    return logger
