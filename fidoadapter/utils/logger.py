"""
Logger configuration for fidoadapter.
"""

import logging
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname).1s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> None:
    """
    Set the package logger level and optionally mirror records to a file.

    A file handler added by an earlier call is closed and replaced.
    """
    logger = get_logger("fidoadapter")
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.INFO)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(file_handler)
