"""
Logging setup for weave-api.

All modules obtain a bound loguru logger through ``get_logger(__name__)``;
the CLI calls ``init_logger`` once to install the stderr sink.
"""

import sys

from loguru import logger

from weaveapi.models.enums import LogLevel

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

# loguru has no "full" level; it maps to TRACE with backtraces enabled
_LEVEL_MAP = {
    LogLevel.FULL: "TRACE",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARNING",
}


def get_logger(name: str):
    """Get a logger bound to the given module name."""
    return logger.bind(name=name)


def init_logger(level: LogLevel | str = LogLevel.INFO) -> None:
    """
    Reset loguru sinks to a single stderr sink.

    Args:
        level: Verbosity, as a LogLevel or its string value.
    """
    level = LogLevel(level)
    logger.remove()
    # records from unbound loggers still need a name for LOG_FORMAT
    logger.configure(extra={"name": "weaveapi"})
    logger.add(
        sys.stderr,
        level=_LEVEL_MAP[level],
        format=LOG_FORMAT,
        backtrace=level == LogLevel.FULL,
        diagnose=level == LogLevel.FULL,
    )
