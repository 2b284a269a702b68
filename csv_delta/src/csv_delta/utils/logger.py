from __future__ import annotations

import os
import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, TextIO

# Leveled logger with optional file output and timestamps
# Use: from csv_delta.utils.logger import log, LogLevel
# log.info("message")
# log.debug("[RECONCILE] strategy chosen", extra={"rows": 12})
# log.error("error occurred", exc_info=sys.exc_info())


class LogLevel(IntEnum):
    """Log severity levels."""
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    CRITICAL = 50


DEBUG_LOG_PATH = Path("/tmp/csv_delta_debug.log")


class Logger:
    """Leveled logger writing to stderr and, optionally, a file."""

    def __init__(self):
        self._level = LogLevel.INFO
        self._file_handle: TextIO | None = None
        self._headless_cached: bool | None = None
        self._format_string = "{timestamp} [{level:8}] {message}"

        self._configure_from_env()

    def _configure_from_env(self) -> None:
        """Configure logger from environment variables."""
        if os.environ.get("CSV_DELTA_DEBUG") == "1":
            self._level = LogLevel.DEBUG
            self.set_file_output(DEBUG_LOG_PATH)

        # LOG_LEVEL wins over CSV_DELTA_DEBUG
        level_str = os.environ.get("LOG_LEVEL", "").upper()
        level_str = {"WARNING": "WARN"}.get(level_str, level_str)
        if level_str in LogLevel.__members__:
            self._level = LogLevel[level_str]

    @property
    def level(self) -> LogLevel:
        return self._level

    def set_level(self, level: LogLevel) -> None:
        """Set the minimum log level."""
        self._level = level

    def set_file_output(self, path: Path, append: bool = True) -> None:
        """Enable file output for logging."""
        try:
            if self._file_handle:
                self._file_handle.close()

            mode = "a" if append else "w"
            self._file_handle = open(path, mode, encoding="utf-8")
        except OSError:
            # Can't log errors about logging setup
            self._file_handle = None

    def close(self) -> None:
        """Close the log file, if any."""
        if self._file_handle:
            try:
                self._file_handle.close()
            except OSError:
                pass
        self._file_handle = None

    def _can_write_console(self) -> bool:
        """Check whether console output is allowed (cached).

        Console output is suppressed while a Textual app owns the terminal.
        """
        if self._headless_cached is not None:
            return not self._headless_cached

        try:
            from textual.app import App  # lazy import

            app = getattr(App, "app", None)
            if app is None:
                return True

            is_headless = bool(getattr(app, "is_headless", False))
            self._headless_cached = is_headless
            return not is_headless
        except (ImportError, AttributeError, RuntimeError):
            self._headless_cached = False
            return False

    def _format_message(
        self,
        level: LogLevel,
        message: str,
        extra: dict | None = None,
        exc_info: tuple | None = None
    ) -> str:
        """Format a log message with timestamp and level."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        formatted = self._format_string.format(
            timestamp=timestamp,
            level=level.name,
            message=message
        )

        if extra:
            formatted += f" | {extra}"

        if exc_info and exc_info[0] is not None:
            import traceback
            exc_str = "".join(traceback.format_exception(*exc_info))
            formatted += f"\n{exc_str}"

        return formatted

    def _write(
        self,
        level: LogLevel,
        *args: Any,
        sep: str = " ",
        extra: dict | None = None,
        exc_info: tuple | None = None
    ) -> None:
        """Write a log message at the specified level."""
        if level < self._level:
            return

        message = sep.join(str(a) for a in args)
        formatted = self._format_message(level, message, extra, exc_info)

        if self._file_handle:
            try:
                self._file_handle.write(formatted + "\n")
                self._file_handle.flush()
            except OSError:
                pass

        if self._can_write_console():
            try:
                color_codes = {
                    LogLevel.DEBUG: "\033[90m",    # Gray
                    LogLevel.INFO: "\033[0m",       # Default
                    LogLevel.WARN: "\033[93m",      # Yellow
                    LogLevel.ERROR: "\033[91m",     # Red
                    LogLevel.CRITICAL: "\033[95m",  # Magenta
                }
                color = color_codes.get(level, "\033[0m")
                reset = "\033[0m"

                if sys.stderr.isatty():
                    sys.stderr.write(f"{color}{formatted}{reset}\n")
                else:
                    sys.stderr.write(formatted + "\n")
                sys.stderr.flush()
            except (OSError, ValueError):
                # Never raise from logging
                pass

    def debug(self, *args: Any, **kwargs) -> None:
        """Log a debug message."""
        self._write(LogLevel.DEBUG, *args, **kwargs)

    def info(self, *args: Any, **kwargs) -> None:
        """Log an info message."""
        self._write(LogLevel.INFO, *args, **kwargs)

    def warning(self, *args: Any, **kwargs) -> None:
        """Log a warning message."""
        self._write(LogLevel.WARN, *args, **kwargs)

    def error(self, *args: Any, **kwargs) -> None:
        """Log an error message."""
        self._write(LogLevel.ERROR, *args, **kwargs)

    def critical(self, *args: Any, **kwargs) -> None:
        """Log a critical message."""
        self._write(LogLevel.CRITICAL, *args, **kwargs)


log = Logger()
