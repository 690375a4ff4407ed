"""
Logging setup shared by all modules.
"""

import logging
import sys

from calendar_engine.core.config import get_settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger with a single stream handler attached."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(get_settings().LOG_LEVEL.upper())
    logger.propagate = False
    return logger
