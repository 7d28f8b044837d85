"""
Logging configuration for Meeting Radar.
Colored console output on stdout, plus a rotating log file when enabled.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .settings import settings

ROOT_LOGGER_NAME = "meeting_radar"
LOG_FILE_NAME = "meeting_radar.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        # Color a copy so the file handler sees the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt=DATE_FORMAT
    ))
    return handler


def _file_handler(level: int, log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
        datefmt=DATE_FORMAT
    ))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    enable_file_logging: Optional[bool] = None
) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Args:
        log_level: Override the configured level; `DEBUG=true` in the
            environment forces DEBUG when no override is given.
        enable_file_logging: Override the log_to_file setting.

    Returns:
        The configured `meeting_radar` logger.
    """
    if log_level is None:
        log_level = "DEBUG" if settings.debug else settings.log_level
    level = getattr(logging, log_level.upper())
    if enable_file_logging is None:
        enable_file_logging = settings.log_to_file

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_console_handler(level))

    if enable_file_logging:
        root.addHandler(_file_handler(level, Path(settings.log_dir)))

    return root


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. `get_logger("google")` -> `meeting_radar.google`."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# Handlers are attached by setup_logging()
logger = logging.getLogger(ROOT_LOGGER_NAME)
