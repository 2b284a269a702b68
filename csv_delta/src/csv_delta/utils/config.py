from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .logger import log


class ConfigError(Exception):
    """Configuration validation error."""

    pass


@dataclass
class PathsConfig:
    """Input paths for one csv-delta run.

    Either ``diff_path`` (a unified diff, ``-`` for stdin) or the
    ``before_path``/``after_path`` pair is expected.
    """

    diff_path: str | None = None
    before_path: str | None = None
    after_path: str | None = None

    @classmethod
    def from_args(cls, args) -> PathsConfig:
        """Create PathsConfig from command line arguments."""
        return cls(diff_path=args.diff, before_path=args.before, after_path=args.after)

    @classmethod
    def from_env(cls) -> PathsConfig:
        """Create PathsConfig from environment variables."""
        return cls(
            diff_path=os.environ.get('CSV_DELTA_DIFF'),
            before_path=os.environ.get('CSV_DELTA_BEFORE'),
            after_path=os.environ.get('CSV_DELTA_AFTER'),
        )

    def merge_with_env(self) -> PathsConfig:
        """Merge with environment variables, keeping existing values if they exist."""
        return PathsConfig(
            diff_path=self.diff_path or os.environ.get('CSV_DELTA_DIFF'),
            before_path=self.before_path or os.environ.get('CSV_DELTA_BEFORE'),
            after_path=self.after_path or os.environ.get('CSV_DELTA_AFTER'),
        )

    @property
    def is_file_pair(self) -> bool:
        return bool(self.before_path and self.after_path)


class Config:
    """csv-delta configuration with environment variable support and validation."""

    # Default values
    _DEFAULT_KEY_OVERLAP: Final[float] = 0.30
    _DEFAULT_WORD_RETENTION: Final[float] = 0.2
    _DEFAULT_CHAR_RETENTION: Final[float] = 0.6
    _DEFAULT_DEBOUNCE_MS: Final[int] = 300
    _DEFAULT_MAX_CELL_CHARS: Final[int] = 200
    _DEFAULT_MAX_PATH_LENGTH: Final[int] = 4096

    # Validation bounds
    _MIN_RATIO: Final[float] = 0.0
    _MAX_RATIO: Final[float] = 1.0
    _MIN_DEBOUNCE_MS: Final[int] = 50
    _MAX_DEBOUNCE_MS: Final[int] = 2000
    _MIN_CELL_CHARS: Final[int] = 10
    _MAX_CELL_CHARS: Final[int] = 10000
    _MIN_MAX_PATH_LENGTH: Final[int] = 1024
    _MAX_MAX_PATH_LENGTH: Final[int] = 65536

    def __init__(self):
        """Initialize configuration with environment variable overrides."""
        self.key_overlap = self._get_float_env("CSV_DELTA_KEY_OVERLAP", self._DEFAULT_KEY_OVERLAP)
        self.word_retention = self._get_float_env("CSV_DELTA_WORD_RETENTION", self._DEFAULT_WORD_RETENTION)
        self.char_retention = self._get_float_env("CSV_DELTA_CHAR_RETENTION", self._DEFAULT_CHAR_RETENTION)
        self.debounce_ms = self._get_int_env("CSV_DELTA_DEBOUNCE_MS", self._DEFAULT_DEBOUNCE_MS)
        self.max_cell_chars = self._get_int_env("CSV_DELTA_MAX_CELL_CHARS", self._DEFAULT_MAX_CELL_CHARS)
        self.max_path_length = self._get_int_env("CSV_DELTA_MAX_PATH_LENGTH", self._DEFAULT_MAX_PATH_LENGTH)

        self._validate_all()

    def _get_int_env(self, key: str, default: int) -> int:
        """Get integer environment variable with fallback to default."""
        value = os.environ.get(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError as e:
            log.warning(f"Invalid integer value for {key}='{value}', using default {default}: {e}")
            return default

    def _get_float_env(self, key: str, default: float) -> float:
        """Get float environment variable with fallback to default."""
        value = os.environ.get(key)
        if value is None:
            return default

        try:
            return float(value)
        except ValueError as e:
            log.warning(f"Invalid float value for {key}='{value}', using default {default}: {e}")
            return default

    def _validate_all(self) -> None:
        """Validate all configuration values."""
        self._validate_float("key_overlap", self.key_overlap, self._MIN_RATIO, self._MAX_RATIO)
        self._validate_float("word_retention", self.word_retention, self._MIN_RATIO, self._MAX_RATIO)
        self._validate_float("char_retention", self.char_retention, self._MIN_RATIO, self._MAX_RATIO)
        self._validate_int("debounce_ms", self.debounce_ms, self._MIN_DEBOUNCE_MS, self._MAX_DEBOUNCE_MS)
        self._validate_int("max_cell_chars", self.max_cell_chars, self._MIN_CELL_CHARS, self._MAX_CELL_CHARS)
        self._validate_int(
            "max_path_length", self.max_path_length, self._MIN_MAX_PATH_LENGTH, self._MAX_MAX_PATH_LENGTH
        )

    def _validate_int(self, name: str, value: int, min_val: int, max_val: int) -> None:
        """Validate integer configuration value."""
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"{name} must be an integer, got {type(value).__name__}")
        if not (min_val <= value <= max_val):
            raise ConfigError(f"{name} must be between {min_val} and {max_val}, got {value}")

    def _validate_float(self, name: str, value: float, min_val: float, max_val: float) -> None:
        """Validate float configuration value."""
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ConfigError(f"{name} must be a number, got {type(value).__name__}")
        if not (min_val <= value <= max_val):
            raise ConfigError(f"{name} must be between {min_val} and {max_val}, got {value}")

    def __repr__(self) -> str:
        """String representation of configuration."""
        return (
            f"Config(key_overlap={self.key_overlap}, "
            f"word_retention={self.word_retention}, "
            f"char_retention={self.char_retention}, "
            f"debounce_ms={self.debounce_ms}, "
            f"max_cell_chars={self.max_cell_chars}, "
            f"max_path_length={self.max_path_length})"
        )


# Global configuration instance
config = Config()
