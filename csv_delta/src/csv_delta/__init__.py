"""csv_delta package initialization.

csv-delta rebuilds the before and after versions of a CSV/TSV file from a
unified diff, aligns their rows and highlights changed cells. The engine
lives in ``csv_delta.utils``; the most used entry points are re-exported here.
"""

from __future__ import annotations

from csv_delta.utils.cell_highlighter import ChangeSegment, diff_cells, highlight_row
from csv_delta.utils.diff_parser import ChangeLine, ChangeStatus, classify_diff_lines
from csv_delta.utils.pipeline import TableDiff, Thresholds, compare_change_lines, compare_diff_text, compare_tables
from csv_delta.utils.row_reconciler import MatchedRow, RowStatus, reconcile
from csv_delta.utils.stream_splitter import build_tables, split_streams

__version__ = "0.1.0"

__all__ = [
    "ChangeLine",
    "ChangeSegment",
    "ChangeStatus",
    "MatchedRow",
    "RowStatus",
    "TableDiff",
    "Thresholds",
    "build_tables",
    "classify_diff_lines",
    "compare_change_lines",
    "compare_diff_text",
    "compare_tables",
    "diff_cells",
    "highlight_row",
    "reconcile",
    "split_streams",
]
