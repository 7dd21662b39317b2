"""Logging setup for applications embedding the hypermedia package.

The package itself only ever calls ``logging.getLogger(__name__)``; this
module is for callers that want its records on the console.
"""

import logging
import sys
from typing import Optional

from hypermedia.config.settings import settings

PACKAGE_LOGGER = "hypermedia"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the package logger.

    Args:
        level: Level name to apply. Defaults to ``settings.LOG_LEVEL``.

    Returns:
        The configured ``hypermedia`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Calling twice must not duplicate output
    if any(type(handler) is logging.StreamHandler for handler in logger.handlers):
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
