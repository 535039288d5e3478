"""Handler creation and management for logging system.

- Console handler with hybrid formatting
- Rotating file handler with automatic log rotation
- Root logger setup with QueueListener so awaiting code never blocks on I/O
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from safari_publisher.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_ROOT_NAME,
    LOG_ROTATION_THRESHOLD_BYTES,
)
from safari_publisher.logger.formatters import HybridConsoleFormatter


class LoggingSetupError(Exception):
    """Error in logging configuration."""


def _create_console_handler(console_level: str) -> logging.StreamHandler:
    """Create console handler with hybrid formatting.

    Args:
        console_level: Log level for console (e.g., "DEBUG", "INFO")

    Returns:
        Configured StreamHandler for console output

    """
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        HybridConsoleFormatter(
            LOG_CONSOLE_FORMAT,
            datefmt=LOG_CONSOLE_DATE_FORMAT,
        )
    )
    console_handler.setLevel(getattr(logging, console_level, logging.INFO))
    return console_handler


def _create_file_handler(log_file: Path, file_level: str) -> RotatingFileHandler:
    """Create rotating file handler.

    Args:
        log_file: Path to log file
        file_level: Log level for file (e.g., "DEBUG", "INFO")

    Returns:
        Configured RotatingFileHandler

    Raises:
        LoggingSetupError: If file handler creation fails

    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=LOG_ROTATION_THRESHOLD_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT)
        )
        file_handler.setLevel(getattr(logging, file_level, logging.DEBUG))
    except OSError as e:
        msg = f"Failed to setup file logging: {e}"
        raise LoggingSetupError(msg) from e
    else:
        return file_handler


def setup_root_logger(
    state,
    console_level: str,
    file_level: str,
    log_file: Path,
    enable_file_logging: bool,  # noqa: FBT001
) -> None:
    """Initialize root logger with handlers via QueueListener.

    Called exactly once per process. All handlers hang off the listener; the
    root logger itself only carries a QueueHandler.

    Args:
        state: Logger state object (from logger.state module)
        console_level: Console log level
        file_level: File log level
        log_file: Path to log file
        enable_file_logging: Whether to enable file logging

    Raises:
        LoggingSetupError: If handler setup fails

    """
    root_logger = logging.getLogger(LOG_ROOT_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter at handlers
    root_logger.propagate = False

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = [_create_console_handler(console_level)]
    if enable_file_logging:
        handlers.append(_create_file_handler(log_file, file_level))

    state.log_queue = queue.Queue(-1)
    state.queue_listener = QueueListener(
        state.log_queue,
        *handlers,
        respect_handler_level=True,
    )
    state.queue_listener.start()

    root_logger.addHandler(QueueHandler(state.log_queue))
    state.root_initialized = True


def set_console_level(state, console_level: str) -> None:
    """Change the console handler level of a running listener.

    Args:
        state: Logger state object
        console_level: New console log level name

    """
    if state.queue_listener is None:
        return
    level = getattr(logging, console_level, logging.INFO)
    for handler in state.queue_listener.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, RotatingFileHandler
        ):
            handler.setLevel(level)
