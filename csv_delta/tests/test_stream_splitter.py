"""Tests for rebuilding before/after streams from change lines."""

from csv_delta.utils.diff_parser import ChangeLine, ChangeStatus, classify_diff_lines
from csv_delta.utils.stream_splitter import build_tables, split_streams

ADDED = ChangeStatus.ADDED
REMOVED = ChangeStatus.REMOVED
UNCHANGED = ChangeStatus.UNCHANGED


class TestSplitStreams:
    """Test partitioning change lines into two texts."""

    def test_before_and_after_streams(self):
        """Test that context lines go to both sides and changes to one."""
        lines = [
            ChangeLine(UNCHANGED, "id,name"),
            ChangeLine(REMOVED, "1,old"),
            ChangeLine(ADDED, "1,new"),
            ChangeLine(UNCHANGED, "2,same"),
        ]
        before, after = split_streams(lines)

        assert before == "id,name\n1,old\n2,same"
        assert after == "id,name\n1,new\n2,same"

    def test_empty_input(self):
        """Test that no change lines give two empty streams."""
        assert split_streams([]) == ("", "")

    def test_only_additions(self):
        """Test that a new file has an empty before stream."""
        before, after = split_streams([ChangeLine(ADDED, "a,b"), ChangeLine(ADDED, "1,2")])
        assert before == ""
        assert after == "a,b\n1,2"


class TestBuildTables:
    """Test tokenizing both streams."""

    def test_tables_from_diff(self, people_diff):
        """Test rebuilding both versions of a CSV file from its diff."""
        before, after = build_tables(classify_diff_lines(people_diff))

        assert before == [
            ["id", "name", "city"],
            ["1", "Alice", "Paris"],
            ["2", "Bob", "Berlin"],
            ["3", "Carol", "Rome"],
        ]
        assert after == [
            ["id", "name", "city"],
            ["1", "Alice", "Paris"],
            ["3", "Carol", "Milan"],
            ["4", "Dave", "Oslo"],
        ]

    def test_custom_tokenizer(self):
        """Test that the given tokenizer is used for both sides."""
        calls = []

        def tokenizer(text):
            calls.append(text)
            return [text.split(";")] if text else []

        before, after = build_tables([ChangeLine(REMOVED, "a;b"), ChangeLine(ADDED, "a;c")], tokenizer)

        assert calls == ["a;b", "a;c"]
        assert before == [["a", "b"]]
        assert after == [["a", "c"]]

    def test_sides_may_differ_in_row_count(self):
        """Test that a quote change can merge rows on one side only."""
        lines = [
            ChangeLine(REMOVED, '1,"open'),
            ChangeLine(ADDED, '1,"closed"'),
            ChangeLine(UNCHANGED, '2,x"'),
        ]
        before, after = build_tables(lines)

        assert len(before) == 1
        assert len(after) == 2
