"""Logging formatters for console and file output.

- ColoredConsoleFormatter: Adds ANSI color codes to log levels
- SimpleConsoleFormatter: Shows only message content (no metadata)
- HybridConsoleFormatter: Uses simple format for INFO, structured for others

INFO messages are the progress lines of a publish run, so they are printed
bare; warnings and errors keep their timestamp and origin.
"""

import logging

from safari_publisher.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter with ANSI color support for different log levels."""

    def format(self, record: logging.LogRecord) -> str:
        r"""Format log record with colors for console output.

        Temporarily swaps the record's levelname for a colored one, then
        restores it so file handlers sharing the record see plain text.

        Args:
            record: The log record to format

        Returns:
            Formatted log message with ANSI color codes for the level name

        """
        if record.levelname in LOG_COLORS:
            color = LOG_COLORS[record.levelname]
            reset = LOG_COLORS["RESET"]
            original_levelname = record.levelname
            record.levelname = f"{color}{record.levelname}{reset}"
            try:
                return super().format(record)
            finally:
                record.levelname = original_levelname

        return super().format(record)


class SimpleConsoleFormatter(logging.Formatter):
    """Minimal console formatter that only shows the message content."""

    def format(self, record: logging.LogRecord) -> str:
        """Return the message content only, without metadata."""
        return record.getMessage()


class HybridConsoleFormatter(logging.Formatter):
    """Console formatter with simple format for INFO, structured for others.

    Example Output:
        INFO:     "Fetching release info for v1.2.3"
        WARNING:  "12:30:45 - safari_publisher - WARNING - Delete failed"

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize hybrid formatter with structured format template.

        Args:
            fmt: Format string for structured messages (WARNING and above)
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._simple_formatter = SimpleConsoleFormatter()
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record using simple or structured format by level."""
        if record.levelno == logging.INFO:
            return self._simple_formatter.format(record)
        return self._colored_formatter.format(record)
