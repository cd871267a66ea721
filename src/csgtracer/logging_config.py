"""Logging setup for csgtracer.

All modules log through children of the "csgtracer" logger. As a library
the package only attaches a NullHandler; applications that want the log on
stderr call configure_logging() once at startup.
"""

import logging

PACKAGE_LOGGER = "csgtracer"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return the logger for name.

    Args:
        name: Logger name, normally the calling module's __name__.

    Returns:
        The logger instance.
    """
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.INFO) -> logging.Handler:
    """Send package log records to stderr with timestamps.

    Calling this again only changes the level; the stream handler is
    attached once.

    Args:
        level: Level for the package logger.

    Returns:
        The stream handler writing the records.
    """
    package_logger = get_logger()
    for handler in package_logger.handlers:
        if type(handler) is logging.StreamHandler:
            break
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    set_log_level(level)
    return handler


def set_log_level(level: int | str) -> None:
    """Set the level of the package logger (e.g. logging.DEBUG or "DEBUG")."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    get_logger().setLevel(level)


__all__ = ["configure_logging", "get_logger", "set_log_level", "LOG_FORMAT"]
