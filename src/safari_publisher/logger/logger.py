"""Main logger module providing public API functions.

- setup_logging(): Configure logging with async-safe QueueHandler architecture
- get_logger(): Get or create logger instance
- set_console_level(): Adjust console verbosity after startup
- flush_all_handlers(): Ensure all pending log records are written
"""

import atexit
import contextlib
import logging
import os
import time
from pathlib import Path

from safari_publisher.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_FILE_LOG_LEVEL,
    LOG_DIR_ENV,
    LOG_FILE_NAME,
    LOG_ROOT_NAME,
)
from safari_publisher.logger import handlers
from safari_publisher.logger.state import get_state


def load_log_settings() -> tuple[str, str, Path]:
    """Return default console level, file level and log file path.

    ``SAFARI_PUBLISHER_LOG_DIR`` overrides the log directory; the test
    suite points it at a temporary directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(LOG_DIR_ENV)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / ".config"
            / "safari-publisher"
            / "logs"
            / LOG_FILE_NAME
        )
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_FILE_LOG_LEVEL, log_path


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    Waits (bounded) for the queue to drain, then flushes each handler.
    """
    state = get_state()
    if state.queue_listener is not None and state.log_queue is not None:
        timeout = 5.0
        start_time = time.time()
        while not state.log_queue.empty():
            if time.time() - start_time > timeout:
                break
            time.sleep(0.01)

        time.sleep(0.1)

        for handler in state.queue_listener.handlers:
            with contextlib.suppress(OSError, ValueError):
                handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = LOG_ROOT_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging and return the named logger.

    The root ``safari_publisher`` logger is initialized exactly once;
    child loggers created with ``__name__`` propagate to it.

    Args:
        name: Logger name, typically __name__
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to log file
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance (singleton per name via logging.getLogger)

    Raises:
        LoggingSetupError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            cfg_console, cfg_file, cfg_path = load_log_settings()
            handlers.setup_root_logger(
                state,
                console_level or cfg_console,
                file_level or cfg_file,
                log_file or cfg_path,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(name: str = LOG_ROOT_NAME) -> logging.Logger:
    """Get or create a logger; use ``get_logger(__name__)`` in modules."""
    return setup_logging(name=name)


def set_console_level(console_level: str) -> None:
    """Change console verbosity (used by the ``verbose`` flag)."""
    handlers.set_console_level(get_state(), console_level)

