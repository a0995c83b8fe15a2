"""Opt-in logging for dispatchsim.

The library logs through ``logging.getLogger(__name__)`` in every module and
attaches only a NullHandler to the package logger, so nothing is printed
unless an application asks for it:

    import dispatchsim

    dispatchsim.enable_console_logging(level="DEBUG")      # every assignment
    dispatchsim.enable_file_logging("dispatch.log")         # size-rotated file
    dispatchsim.enable_timed_file_logging("dispatch.log")   # rotated at midnight
    dispatchsim.enable_json_logging()                       # one JSON object per line
    dispatchsim.enable_json_file_logging("dispatch.json")   # JSON, size-rotated
    dispatchsim.configure_from_env()                        # DS_* variables

Environment variables read by configure_from_env():
    DS_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DS_LOG_FILE: Path to a rotating log file
    DS_LOG_JSON: "1" for JSON output
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Literal

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_file_logging",
    "enable_json_logging",
    "enable_timed_file_logging",
    "set_level",
    "set_module_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5

LOGGER_NAME = "dispatchsim"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def _get_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Detach and close every non-null handler on the package logger."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def _install(handler: logging.Handler, level: LogLevel | int, formatter: logging.Formatter):
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    handler.setLevel(_get_level(level))
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return handler


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Log to stderr.

    Returns:
        The created StreamHandler.
    """
    return _install(logging.StreamHandler(), level, logging.Formatter(format, date_format))


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    json_format: bool = False,
) -> RotatingFileHandler:
    """Log to a size-rotated file. Parent directories are created.

    Args:
        path: Log file location.
        level: Minimum level to record.
        max_bytes: Rotate once the file reaches this size.
        backup_count: Rotated files to keep.
        json_format: Write JsonFormatter records instead of plain text.

    Returns:
        The created RotatingFileHandler.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    formatter = JsonFormatter() if json_format else logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    return _install(handler, level, formatter)


def enable_timed_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    when: str = "midnight",
    interval: int = 1,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> TimedRotatingFileHandler:
    """Log to a file rotated on a schedule. Parent directories are created.

    Args:
        path: Log file location.
        level: Minimum level to record.
        when: TimedRotatingFileHandler unit ('S', 'M', 'H', 'D', 'midnight', 'W0'-'W6').
        interval: How many `when` units between rotations.
        backup_count: Rotated files to keep.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created TimedRotatingFileHandler.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(path, when=when, interval=interval, backupCount=backup_count)
    return _install(handler, level, logging.Formatter(format, date_format))


def enable_json_logging(level: LogLevel | int = "INFO") -> logging.StreamHandler:
    """Log JSON records to stderr."""
    return _install(logging.StreamHandler(), level, JsonFormatter())


def enable_json_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> RotatingFileHandler:
    """Log JSON records to a size-rotated file."""
    return enable_file_logging(
        path,
        level=level,
        max_bytes=max_bytes,
        backup_count=backup_count,
        json_format=True,
    )


def configure_from_env() -> None:
    """Configure logging from DS_LOGGING, DS_LOG_FILE and DS_LOG_JSON.

    Does nothing when neither DS_LOGGING nor DS_LOG_FILE is set.
    """
    level = os.environ.get("DS_LOGGING", "").upper()
    log_file = os.environ.get("DS_LOG_FILE", "")
    use_json = os.environ.get("DS_LOG_JSON", "") == "1"

    if not level and not log_file:
        return

    level = level or "INFO"
    if log_file:
        enable_file_logging(log_file, level=level, json_format=use_json)
    elif use_json:
        enable_json_logging(level=level)
    else:
        enable_console_logging(level=level)


def set_level(level: LogLevel | int) -> None:
    _get_logger().setLevel(_get_level(level))


def set_module_level(module: str, level: LogLevel | int) -> None:
    """Set the level of one submodule, e.g. ``"components.dispatch.engine"``."""
    logging.getLogger(f"{LOGGER_NAME}.{module}").setLevel(_get_level(level))


def disable_logging() -> None:
    """Remove all handlers and silence the package logger."""
    logger = _get_logger()
    _clear_handlers()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
