"""Logging utilities for safari-publisher.

Structured logging with colored console output, a rotating log file and a
QueueHandler/QueueListener pair so the asyncio pipeline never blocks on
handler I/O.

Usage:
    >>> from safari_publisher.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Fetching %s", asset_name)  # Use %-style formatting

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Handlers are ONLY attached to the root 'safari_publisher' logger
    4. Never use f-strings in log calls
"""

from safari_publisher.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from safari_publisher.logger.handlers import LoggingSetupError
from safari_publisher.logger.logger import (
    flush_all_handlers,
    get_logger,
    set_console_level,
    setup_logging,
)

__all__ = [
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "LoggingSetupError",
    "SimpleConsoleFormatter",
    "flush_all_handlers",
    "get_logger",
    "set_console_level",
    "setup_logging",
]
