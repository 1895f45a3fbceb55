"""Structured logging configuration for Atomic Templates.

Handlers are attached to the ``atomic_templates`` logger, not the root logger,
so an application's own logging setup is left alone. Console output is
human-readable. When a log file is given, records are also written as JSON
with 10MB rotation and 5 backups, carrying the ``log_with_context`` fields
(``event_type``, ``template_name``, ``path`` ...) as top-level keys.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger.json import JsonFormatter

PACKAGE_LOGGER = "atomic_templates"

JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(threadName)s %(message)s %(filename)s %(lineno)d"
CONSOLE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s"

# Marks handlers installed by setup_logging so a second call replaces only those
_HANDLER_TAG = "_atomic_templates_handler"


def setup_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
    *,
    console: bool = True,
    propagate: bool = False,
) -> logging.Logger:
    """Configure the package logger with console and optional JSON file output.

    Calling this again replaces the handlers it installed earlier; handlers
    added by anyone else are kept.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of the JSON log file, or None for no file output
        console: Also log to stdout
        propagate: Pass records on to the root logger's handlers too

    Returns:
        The configured ``atomic_templates`` logger
    """
    level = getattr(logging, log_level.upper())
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.propagate = propagate

    for handler in [h for h in package_logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        package_logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        json_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        json_handler.setFormatter(JsonFormatter(JSON_LOG_FORMAT, timestamp=True))
        json_handler.setLevel(logging.DEBUG)
        _install(package_logger, json_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        console_handler.setLevel(level)
        _install(package_logger, console_handler)

    return package_logger


def _install(package_logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG, True)
    package_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with structured logging support.

    Args:
        name: Logger name (typically __name__, so it sits below ``atomic_templates``)

    Returns:
        Logger instance configured for structured logging
    """
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields: Any,
) -> None:
    """Log a message with additional structured context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **extra_fields: Additional fields to include in JSON log (e.g., template_name, path)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=extra_fields)
