"""Tests for the csv-delta command line."""

import io
import sys

import pytest

from csv_delta.entry_points import _create_argument_parser, main


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Give Rich enough columns that table cells are not wrapped."""
    monkeypatch.setenv("COLUMNS", "200")
    for key in ("CSV_DELTA_DIFF", "CSV_DELTA_BEFORE", "CSV_DELTA_AFTER"):
        monkeypatch.delenv(key, raising=False)


class TestArgumentParser:
    """Test command line parsing."""

    def test_defaults(self):
        """Test that no arguments means stdin and the interactive viewer."""
        args = _create_argument_parser().parse_args([])
        assert args.diff is None
        assert not args.plain
        assert not args.watch
        assert not args.all_files

    def test_file_pair_options(self):
        """Test the --before/--after options."""
        args = _create_argument_parser().parse_args(["--before", "a.csv", "--after", "b.csv", "--delimiter", "tab"])
        assert args.before == "a.csv"
        assert args.after == "b.csv"
        assert args.delimiter == "tab"


class TestPlainOutput:
    """Test printing tables without the viewer."""

    def test_diff_file(self, tmp_path, capsys, people_diff):
        """Test printing a diff file as a table."""
        diff_file = tmp_path / "change.diff"
        diff_file.write_text(people_diff, encoding="utf-8")

        main(["--plain", str(diff_file)])

        out = capsys.readouterr().out
        assert "people.csv" in out
        assert "Milan" in out
        assert "Dave" in out

    def test_file_pair(self, capsys, csv_file_pair):
        """Test printing a before/after file comparison."""
        before, after = csv_file_pair

        main(["--plain", "--before", before, "--after", after])

        out = capsys.readouterr().out
        assert "Gizmo" in out
        assert "Gadget" in out

    def test_no_tabular_files(self, tmp_path, capsys):
        """Test the message when a diff touches no CSV/TSV files."""
        diff_file = tmp_path / "docs.diff"
        diff_file.write_text("diff --git a/a.md b/a.md\n--- a/a.md\n+++ b/a.md\n@@ -1 +1 @@\n-x\n+y\n")

        main(["--plain", str(diff_file)])

        assert "No tabular changes found." in capsys.readouterr().out

    def test_piped_stdin_prints_tables(self, monkeypatch, capsys, people_diff):
        """Test that a diff piped on stdin is printed rather than opened in the viewer."""
        monkeypatch.setattr(sys, "stdin", io.StringIO(people_diff))

        main([])

        assert "Milan" in capsys.readouterr().out


class TestConfigurationErrors:
    """Test that invalid inputs exit with status 1."""

    def test_before_without_after(self, capsys, csv_file_pair):
        """Test that a lone --before is rejected."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--before", csv_file_pair[0]])

        assert exc_info.value.code == 1
        assert "Configuration Error" in capsys.readouterr().err

    def test_missing_diff_file(self, tmp_path):
        """Test that a missing diff file is rejected."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--plain", str(tmp_path / "missing.diff")])
        assert exc_info.value.code == 1

    def test_bad_delimiter(self, tmp_path, people_diff):
        """Test that a multi-character delimiter is rejected."""
        diff_file = tmp_path / "change.diff"
        diff_file.write_text(people_diff, encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["--plain", "--delimiter", "::", str(diff_file)])
        assert exc_info.value.code == 1

    def test_watch_needs_files(self):
        """Test that --watch cannot be used with stdin."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--watch", "-"])
        assert exc_info.value.code == 1
