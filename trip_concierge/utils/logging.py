"""
Logging setup for the Trip Concierge system.

Everything logs through loguru. Module loggers carry their module name as
the ``module`` extra, which both sinks print.
"""

import os
import sys

from loguru import logger

from trip_concierge.config import LogLevel

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[module]}:{function}:{line} - {message}"
)


def get_logger(name: str):
    """Logger bound to a module name, typically ``__name__``."""
    return logger.bind(module=name)


def setup_logging(
    log_level: LogLevel | str = LogLevel.INFO, log_file: str | None = None
):
    """
    Replace loguru's default sink with the application sinks.

    Args:
        log_level: Minimum level, as a LogLevel or its name
        log_file: Optional path of a rotating log file
    """
    level = LogLevel(log_level.upper()) if isinstance(log_level, str) else log_level

    handlers: list[dict] = [
        {"sink": sys.stderr, "format": CONSOLE_FORMAT, "level": level.value}
    ]
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        handlers.append(
            {
                "sink": log_file,
                "format": FILE_FORMAT,
                "level": level.value,
                "rotation": "10 MB",
                "retention": 5,
            }
        )

    logger.configure(handlers=handlers, extra={"module": "trip_concierge"})
    logger.info(f"Logging at {level.value}")
