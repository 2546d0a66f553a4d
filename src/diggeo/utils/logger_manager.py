"""
diggeo Logger Manager
Console logging on stderr plus an optional log file with traceback capture.
"""

import logging
import os
import sys
import traceback

from diggeo.errors import ConfigError

LOGGER_NAME = "diggeo"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# -------------------------------
# Console + File Log Setup
# -------------------------------
def setup_logger(verbose: bool = False, log_file: str | None = None):
    """
    Configure the shared "diggeo" logger.
    stdout is reserved for geolocation bodies, so the console handler writes to stderr.
    A file handler is added when log_file (or DIGGEO_LOG_FILE) is set.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = log_file or os.getenv("DIGGEO_LOG_FILE")
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            raise ConfigError(f"cannot open log file {log_file}: {e}")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger():
    return logging.getLogger(LOGGER_NAME)


# -------------------------------
# Error Handler with Traceback
# -------------------------------
def log_exception(logger, context: str, error: Exception):
    """Writes the error and its traceback at ERROR level."""
    tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    logger.error(f"{context}: {error}\n{tb.rstrip()}")
