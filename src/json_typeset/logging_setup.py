"""Logging configuration for the json-typeset command.

Library modules only call ``logging.getLogger(__name__)``; this module is what
the CLI uses to attach a single coloured stdout handler to the root logger.
"""

from __future__ import annotations

import logging
import os
import sys

from yachalk import chalk

__all__ = ["ChalkFormatter", "resolve_env_log_level", "resolve_log_level", "setup_logging"]

LOG_LEVEL_ENV = "JSON_TYPESET_LOG_LEVEL"
LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


class ChalkFormatter(logging.Formatter):
    """Formatter that colours each record according to its severity."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        level = record.levelno
        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        return chalk.gray(message)


def resolve_log_level(value: str | None) -> int | None:
    """Map a level name ("debug", "INFO") or number ("10") to a logging level.

    Returns None for empty or unknown values.
    """
    if not value:
        return None
    v = value.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def resolve_env_log_level() -> int | None:
    """Return the level named by ``JSON_TYPESET_LOG_LEVEL``, or None if unset."""
    return resolve_log_level(os.environ.get(LOG_LEVEL_ENV))


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger with one coloured stdout handler.

    If ``level`` is None the environment is consulted; the default is WARNING.
    """
    if level is None:
        level = resolve_env_log_level() or logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace existing handlers to prevent duplicate log lines
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root_logger.addHandler(handler)
