"""
Logging setup for innosim.

The engine keeps its own user-facing event log as part of the state; this
module only configures the diagnostic loggers that mirror it.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER_NAME = "innosim"


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger living under the ``innosim`` namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """
    Attach a stdout handler to the package root logger.

    Calling this more than once only adjusts the level.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
