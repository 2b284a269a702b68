"""Tests for unified diff parsing.

Covers line classification, splitting multi-file diffs into per-file
sections and building change lines from two whole texts.
"""

from csv_delta.utils.diff_parser import (
    ChangeLine,
    ChangeStatus,
    FileDiff,
    changes_between,
    classify_diff_lines,
    classify_line,
    is_tabular_path,
    split_file_diffs,
    split_lines,
)


class TestClassifyLine:
    """Test classification of single diff lines."""

    def test_added_line(self):
        """Test that '+' lines become added with the prefix stripped."""
        assert classify_line("+4,Dave") == ChangeLine(ChangeStatus.ADDED, "4,Dave")

    def test_removed_line(self):
        """Test that '-' lines become removed with the prefix stripped."""
        assert classify_line("-2,Bob") == ChangeLine(ChangeStatus.REMOVED, "2,Bob")

    def test_context_line(self):
        """Test that a leading space marks an unchanged line."""
        assert classify_line(" 1,Alice") == ChangeLine(ChangeStatus.UNCHANGED, "1,Alice")

    def test_only_first_space_is_stripped(self):
        """Test that indentation after the prefix is kept."""
        assert classify_line("   padded") == ChangeLine(ChangeStatus.UNCHANGED, "  padded")

    def test_metadata_lines_are_dropped(self):
        """Test that hunk and file headers and the no-newline marker are dropped."""
        for raw in ("@@ -1,3 +1,3 @@", "--- a/people.csv", "+++ b/people.csv", "\\ No newline at end of file"):
            assert classify_line(raw) is None

    def test_unprefixed_lines_are_dropped(self):
        """Test that lines without a diff prefix are dropped."""
        assert classify_line("index 3b18e51..a0a4f7c 100644") is None
        assert classify_line("diff --git a/x.csv b/x.csv") is None
        assert classify_line("") is None

    def test_empty_added_line(self):
        """Test that a bare '+' is an added empty line."""
        assert classify_line("+") == ChangeLine(ChangeStatus.ADDED, "")


class TestClassifyDiffLines:
    """Test classification of whole diffs."""

    def test_classifies_in_order(self, people_diff):
        """Test that change lines keep the diff's order."""
        lines = classify_diff_lines(people_diff)

        assert [line.status for line in lines] == [
            ChangeStatus.UNCHANGED,
            ChangeStatus.UNCHANGED,
            ChangeStatus.REMOVED,
            ChangeStatus.REMOVED,
            ChangeStatus.ADDED,
            ChangeStatus.ADDED,
        ]
        assert lines[0].text == "id,name,city"
        assert lines[-1].text == "4,Dave,Oslo"

    def test_empty_input(self):
        """Test that empty input yields no lines rather than an error."""
        assert classify_diff_lines("") == []

    def test_garbage_input(self):
        """Test that text with no diff lines yields an empty result."""
        assert classify_diff_lines("hello\nworld\n") == []


class TestSplitFileDiffs:
    """Test splitting multi-file diffs."""

    def test_git_diff_sections(self, multi_file_diff):
        """Test that each 'diff --git' header starts a section."""
        sections = split_file_diffs(multi_file_diff)

        assert [section.path for section in sections] == ["people.csv", "README.md", "scores.tsv"]
        assert "+4,Dave,Oslo" in sections[0].text
        assert "+4,Dave,Oslo" not in sections[1].text

    def test_plain_unified_diff(self):
        """Test that diff -u output is split on ---/+++ header pairs."""
        text = (
            "--- old/a.csv\t2024-01-01 10:00:00\n"
            "+++ new/a.csv\t2024-01-02 10:00:00\n"
            "@@ -1 +1 @@\n"
            "-x\n"
            "+y\n"
        )
        sections = split_file_diffs(text)

        assert len(sections) == 1
        assert sections[0].path == "new/a.csv"

    def test_no_headers(self):
        """Test that a bare hunk becomes one unnamed section."""
        text = "@@ -1 +1 @@\n-x\n+y\n"
        assert split_file_diffs(text) == [FileDiff(path=None, text=text)]

    def test_deleted_file_uses_old_path(self):
        """Test that a file deleted in the diff is named by its old path."""
        text = (
            "diff --git a/gone.csv b/gone.csv\n"
            "deleted file mode 100644\n"
            "--- a/gone.csv\n"
            "+++ /dev/null\n"
            "@@ -1 +0,0 @@\n"
            "-a,b\n"
        )
        assert split_file_diffs(text)[0].path == "gone.csv"

    def test_git_header_without_file_headers(self):
        """Test that a binary or mode-only change falls back to the git header."""
        text = "diff --git a/data.csv b/data.csv\nold mode 100644\nnew mode 100755\n"
        assert split_file_diffs(text)[0].path == "data.csv"


class TestSplitLines:
    """Test splitting diff text into lines."""

    def test_line_feeds_only(self):
        """Test that only a line feed ends a line."""
        assert split_lines("a\u2028b\x85c\x0bd\x1ee\n") == ["a\u2028b\x85c\x0bd\x1ee"]

    def test_crlf_is_stripped(self):
        assert split_lines("x\r\ny\r\n") == ["x", "y"]

    def test_no_trailing_newline(self):
        assert split_lines("x\ny") == ["x", "y"]
        assert split_lines("x") == ["x"]

    def test_empty_text(self):
        assert split_lines("") == []
        assert split_lines("\n") == [""]

    def test_unicode_line_separators_stay_in_line(self):
        """Test that U+2028 and form feeds inside a field do not split the line."""
        lines = classify_diff_lines('@@ -1 +1 @@\n-1,"a\u2028b"\n+1,"a\x0cc"\n')

        assert lines == [
            ChangeLine(ChangeStatus.REMOVED, '1,"a\u2028b"'),
            ChangeLine(ChangeStatus.ADDED, '1,"a\x0cc"'),
        ]

    def test_crlf_line_endings(self):
        """Test that a CR before each LF is not kept in the line text."""
        lines = classify_diff_lines("@@ -1 +1 @@\r\n-a,1\r\n+a,2\r\n")
        assert [line.text for line in lines] == ["a,1", "a,2"]


class TestChangesBetween:
    """Test building change lines from two texts."""

    def test_replacement_lists_removed_before_added(self):
        """Test that a modified line is a removed line followed by an added line."""
        changes = changes_between("a\nb\nc\n", "a\nB\nc\n")

        assert changes == [
            ChangeLine(ChangeStatus.UNCHANGED, "a"),
            ChangeLine(ChangeStatus.REMOVED, "b"),
            ChangeLine(ChangeStatus.ADDED, "B"),
            ChangeLine(ChangeStatus.UNCHANGED, "c"),
        ]

    def test_unicode_line_separator_in_file(self):
        """Test that only line feeds separate lines of whole files."""
        changes = changes_between("k,v\n1,a\u2028b\n", "k,v\n1,a\u2028c\n")
        assert [line.text for line in changes] == ["k,v", "1,a\u2028b", "1,a\u2028c"]

    def test_identical_texts(self):
        """Test that identical texts give only unchanged lines."""
        changes = changes_between("a\nb\n", "a\nb\n")
        assert all(line.status is ChangeStatus.UNCHANGED for line in changes)
        assert len(changes) == 2


class TestIsTabularPath:
    """Test the CSV/TSV file filter."""

    def test_tabular_extensions(self):
        """Test that .csv and .tsv files are tabular regardless of case."""
        assert is_tabular_path("data/people.csv")
        assert is_tabular_path("SCORES.TSV")

    def test_other_files(self):
        """Test that other files and missing paths are not tabular."""
        assert not is_tabular_path("README.md")
        assert not is_tabular_path(None)
        assert not is_tabular_path("")
