"""Standardized error logging helpers for csv-delta.

Each helper formats a single log line with a bracketed category prefix so
that failures from the reader, the tokenizer, the file watcher and the UI
read the same way in the debug log.
"""

from typing import Optional

from .logger import log


def log_parse_error(source: str, line_num: int, exception: Exception) -> None:
    """Log a tokenizer error for one record.

    Args:
        source: Which stream or file was being parsed (e.g., "before", "data.csv")
        line_num: 1-based input line where the parser gave up
        exception: The exception that was raised
    """
    error_type = type(exception).__name__
    log.warning(f"[CSV] Skipped malformed record in {source} near line {line_num}: {error_type}: {exception}")


def log_ui_error(component: str, action: str, exception: Exception) -> None:
    """Log UI component errors with consistent formatting.

    Args:
        component: Name of the UI component (e.g., "before table", "raw view")
        action: The action being performed (e.g., "syncing cursor", "updating")
        exception: The exception that was raised
    """
    error_type = type(exception).__name__
    log.error(f"[UI] Failed {action} on {component}: {error_type}: {exception}")


def log_watchdog_error(path: str, operation: str, exception: Exception) -> None:
    """Log file watching errors with consistent formatting.

    Args:
        path: Path being watched
        operation: The operation being performed (e.g., "starting observer")
        exception: The exception that was raised
    """
    error_type = type(exception).__name__
    log.error(f"[WATCHDOG] Failed {operation} for {path}: {error_type}: {exception}")


def log_generic_error(context: str, operation: str, exception: Exception, prefix: Optional[str] = None) -> None:
    """Log generic errors with consistent formatting.

    Args:
        context: Context where the error occurred (e.g., "diff reload")
        operation: The operation being performed
        exception: The exception that was raised
        prefix: Optional log prefix for categorization
    """
    error_type = type(exception).__name__
    prefix_str = f"[{prefix}] " if prefix else ""
    log.error(f"{prefix_str}Error in {context} during {operation}: {error_type}: {exception}")
