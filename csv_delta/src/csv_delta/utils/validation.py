"""Input validation for the csv-delta command line.

Paths and delimiters are checked up front so that a bad argument produces a
clear message instead of an empty comparison.
"""

from __future__ import annotations

import os
from pathlib import Path

from .config import PathsConfig, config


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


_NAMED_DELIMITERS = {
    "tab": "\t",
    "\\t": "\t",
    "comma": ",",
    "semicolon": ";",
    "pipe": "|",
}


def validate_file_path(path: str, name: str = "File", must_exist: bool = True, check_readable: bool = True) -> str:
    """Validate a file path for safety and accessibility.

    Args:
        path: The file path to validate
        name: Human-readable name for error messages
        must_exist: Whether the file must already exist
        check_readable: Whether to check if file is readable (only if exists)

    Returns:
        Normalized absolute path

    Raises:
        ValidationError: If validation fails
    """
    if not path or not path.strip():
        raise ValidationError(f"{name} cannot be empty")

    path = path.strip()

    # Block excessive upward traversal (more than 2 levels up)
    if path.count('../') > 2 or path.count('..\\') > 2:
        raise ValidationError(f"{name} contains excessive path traversal sequences")

    if '\x00' in path or any(ord(c) < 32 for c in path if c not in '\t\n\r'):
        raise ValidationError(f"{name} contains invalid characters")

    try:
        resolved_path = Path(path).resolve()
        abs_path = str(resolved_path)
    except (OSError, ValueError) as e:
        raise ValidationError(f"{name} is not a valid path: {e}") from e

    if len(abs_path) > config.max_path_length:
        raise ValidationError(f"{name} is too long (max {config.max_path_length} characters)")

    if must_exist:
        if not resolved_path.exists():
            raise ValidationError(f"{name} does not exist: {abs_path}")

        if not resolved_path.is_file():
            raise ValidationError(f"{name} is not a file: {abs_path}")

        if check_readable and not os.access(abs_path, os.R_OK):
            raise ValidationError(f"{name} is not readable: {abs_path}")

    return abs_path


def validate_delimiter(value: str | None, name: str = "Delimiter") -> str | None:
    """Validate a field delimiter.

    Accepts a single character or one of the names ``tab``, ``comma``,
    ``semicolon``, ``pipe`` (and the escape ``\\t``). None means auto-detect.
    """
    if value is None:
        return None

    named = _NAMED_DELIMITERS.get(value.lower())
    if named:
        return named

    if len(value) != 1:
        raise ValidationError(f"{name} must be a single character, got: {value!r}")
    if value in ('"', '\r', '\n'):
        raise ValidationError(f"{name} cannot be a quote or line break character")
    return value


def validate_paths_config(paths: PathsConfig) -> PathsConfig:
    """Validate the input paths of one run.

    Either a diff path (``-`` or None for stdin) or both before and after
    paths must be given, not a mix.

    Raises:
        ValidationError: If validation fails
    """
    if bool(paths.before_path) != bool(paths.after_path):
        raise ValidationError("--before and --after must be given together")

    if paths.is_file_pair:
        if paths.diff_path:
            raise ValidationError("Give either a diff or --before/--after, not both")
        return PathsConfig(
            before_path=validate_file_path(paths.before_path, "Before file"),
            after_path=validate_file_path(paths.after_path, "After file"),
        )

    if paths.diff_path and paths.diff_path != "-":
        return PathsConfig(diff_path=validate_file_path(paths.diff_path, "Diff file"))
    return PathsConfig(diff_path=paths.diff_path)
