"""Logging configuration for the ``spendscope`` package.

Library modules only call ``logging.getLogger(__name__)``; the host
application calls ``configure_logging`` once at startup.
"""

import logging
import sys
from typing import IO, Optional, Union

from spendscope.domain.settings import LoggingSettings

PACKAGE_LOGGER = "spendscope"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(
    level: Union[int, str, LoggingSettings, None] = None,
    stream: IO[str] = sys.stderr,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling it again replaces the handler instead of stacking another one.

    Args:
        level: Level name, number or LoggingSettings (default INFO)
        stream: Output stream
        fmt: Optional format string

    Returns:
        The configured package logger
    """
    if isinstance(level, LoggingSettings):
        level = level.level
    if level is None:
        level = logging.INFO
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_spendscope", False) or isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler._spendscope = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
