"""Tests for the validation module.

This module tests the input validation functions to ensure they reject
unsafe paths, bad delimiters and conflicting input combinations.
"""

import pytest

from csv_delta.utils.config import PathsConfig
from csv_delta.utils.validation import (
    ValidationError,
    validate_delimiter,
    validate_file_path,
    validate_paths_config,
)


class TestValidateFilePath:
    """Tests for file path validation."""

    def test_valid_existing_file(self, tmp_path):
        """Test validation of a valid existing file."""
        path = tmp_path / "a.csv"
        path.write_text("x\n", encoding="utf-8")
        assert validate_file_path(str(path)) == str(path.resolve())

    def test_empty_path_raises_error(self):
        """Test that empty path raises ValidationError."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            validate_file_path("")

    def test_whitespace_only_path_raises_error(self):
        """Test that whitespace-only path raises ValidationError."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            validate_file_path("   ")

    def test_nonexistent_file_raises_error(self, tmp_path):
        """Test that a missing file raises ValidationError."""
        with pytest.raises(ValidationError, match="does not exist"):
            validate_file_path(str(tmp_path / "missing.csv"))

    def test_directory_is_not_a_file(self, tmp_path):
        """Test that a directory is rejected."""
        with pytest.raises(ValidationError, match="is not a file"):
            validate_file_path(str(tmp_path))

    def test_excessive_traversal(self):
        """Test that deep upward traversal is blocked."""
        with pytest.raises(ValidationError, match="path traversal"):
            validate_file_path("../../../etc/passwd")

    def test_control_characters(self):
        """Test that control characters are rejected."""
        with pytest.raises(ValidationError, match="invalid characters"):
            validate_file_path("bad\x01name.csv")

    def test_must_exist_false(self, tmp_path):
        """Test that existence checks can be skipped."""
        path = tmp_path / "later.csv"
        assert validate_file_path(str(path), must_exist=False) == str(path.resolve())


class TestValidateDelimiter:
    """Tests for delimiter validation."""

    def test_none_means_detect(self):
        """Test that no delimiter is passed through."""
        assert validate_delimiter(None) is None

    def test_named_delimiters(self):
        """Test the named delimiter aliases."""
        assert validate_delimiter("tab") == "\t"
        assert validate_delimiter("TAB") == "\t"
        assert validate_delimiter("\\t") == "\t"
        assert validate_delimiter("semicolon") == ";"
        assert validate_delimiter("pipe") == "|"

    def test_single_character(self):
        """Test that any ordinary single character is accepted."""
        assert validate_delimiter(",") == ","
        assert validate_delimiter(":") == ":"

    def test_multi_character_rejected(self):
        """Test that longer strings are rejected."""
        with pytest.raises(ValidationError, match="single character"):
            validate_delimiter(",,")

    def test_quote_rejected(self):
        """Test that the quote character cannot be a delimiter."""
        with pytest.raises(ValidationError, match="quote or line break"):
            validate_delimiter('"')


class TestValidatePathsConfig:
    """Tests for input combination validation."""

    def test_stdin_default(self):
        """Test that no inputs means reading stdin."""
        assert validate_paths_config(PathsConfig()) == PathsConfig()
        assert validate_paths_config(PathsConfig(diff_path="-")).diff_path == "-"

    def test_before_without_after(self, tmp_path):
        """Test that --before needs --after."""
        with pytest.raises(ValidationError, match="must be given together"):
            validate_paths_config(PathsConfig(before_path=str(tmp_path)))

    def test_diff_and_pair_conflict(self, csv_file_pair):
        """Test that a diff cannot be combined with a file pair."""
        before, after = csv_file_pair
        with pytest.raises(ValidationError, match="not both"):
            validate_paths_config(PathsConfig(diff_path="x.diff", before_path=before, after_path=after))

    def test_file_pair_is_resolved(self, csv_file_pair):
        """Test that valid pair paths are normalized."""
        before, after = csv_file_pair
        paths = validate_paths_config(PathsConfig(before_path=before, after_path=after))
        assert paths.is_file_pair
        assert paths.before_path.endswith("before.csv")

    def test_missing_diff_file(self, tmp_path):
        """Test that a missing diff file is reported."""
        with pytest.raises(ValidationError, match="Diff file does not exist"):
            validate_paths_config(PathsConfig(diff_path=str(tmp_path / "none.diff")))
