"""End-to-end comparison: change lines in, aligned and highlighted rows out.

This module composes the classifier, stream splitter, reconciler and cell
highlighter. Every function here is a pure transform of its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .cell_highlighter import DEFAULT_CHAR_RETENTION, DEFAULT_WORD_RETENTION, CellDiff, highlight_row
from .csv_tokenizer import Table, Tokenizer, make_tokenizer
from .diff_parser import ChangeLine, classify_diff_lines
from .logger import log
from .row_reconciler import DEFAULT_KEY_OVERLAP, AlignmentStrategy, MatchedRow, RowStatus, reconcile_with_strategy
from .stream_splitter import build_tables


@dataclass(frozen=True)
class Thresholds:
    """Tuning knobs for key detection and cell highlighting."""

    key_overlap: float = DEFAULT_KEY_OVERLAP
    word_retention: float = DEFAULT_WORD_RETENTION
    char_retention: float = DEFAULT_CHAR_RETENTION

    @classmethod
    def from_config(cls, cfg) -> Thresholds:
        return cls(
            key_overlap=cfg.key_overlap,
            word_retention=cfg.word_retention,
            char_retention=cfg.char_retention,
        )


@dataclass(frozen=True)
class RowComparison:
    """A matched row plus the per-column detail of its changes."""

    matched: MatchedRow
    cells: tuple[CellDiff, ...] = ()

    @property
    def status(self) -> RowStatus:
        return self.matched.status

    def cell(self, column: int) -> Optional[CellDiff]:
        """The CellDiff for ``column``, or None when that column did not change."""
        for cell in self.cells:
            if cell.column == column:
                return cell
        return None


@dataclass(frozen=True)
class TableDiff:
    """The full comparison of one file."""

    rows: tuple[RowComparison, ...]
    strategy: AlignmentStrategy
    path: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def width(self) -> int:
        return max((row.matched.width for row in self.rows), default=0)

    def count(self, status: RowStatus) -> int:
        return sum(1 for row in self.rows if row.status is status)

    def summary(self) -> dict[str, int]:
        return {status.value: self.count(status) for status in RowStatus}


def compare_tables(
    before: Sequence[Sequence[str]],
    after: Sequence[Sequence[str]],
    *,
    thresholds: Optional[Thresholds] = None,
    path: Optional[str] = None,
) -> TableDiff:
    """Reconcile two tables and highlight the cells of modified rows."""
    thresholds = thresholds or Thresholds()
    matched_rows, strategy = reconcile_with_strategy(before, after, key_overlap=thresholds.key_overlap)
    rows = tuple(
        RowComparison(
            matched=matched,
            cells=tuple(
                highlight_row(
                    matched,
                    word_retention=thresholds.word_retention,
                    char_retention=thresholds.char_retention,
                )
            ),
        )
        for matched in matched_rows
    )
    diff = TableDiff(rows=rows, strategy=strategy, path=path)
    log.debug(f"[PIPELINE] Compared {path or 'table'}", extra=diff.summary())
    return diff


def compare_change_lines(
    lines: Sequence[ChangeLine],
    *,
    tokenizer: Optional[Tokenizer] = None,
    thresholds: Optional[Thresholds] = None,
    path: Optional[str] = None,
    delimiter: Optional[str] = None,
) -> TableDiff:
    """Compare the before/after tables rebuilt from typed change lines.

    Zero change lines give an empty TableDiff, meaning nothing to show.
    """
    if tokenizer is None:
        sample = "\n".join(line.text for line in lines)
        tokenizer = make_tokenizer(delimiter=delimiter, path=path, sample=sample)
    before, after = build_tables(lines, tokenizer)
    return compare_tables(before, after, thresholds=thresholds, path=path)


def compare_diff_text(
    diff_text: str,
    *,
    tokenizer: Optional[Tokenizer] = None,
    thresholds: Optional[Thresholds] = None,
    path: Optional[str] = None,
    delimiter: Optional[str] = None,
) -> TableDiff:
    """Classify raw unified diff text, then compare as compare_change_lines()."""
    lines = classify_diff_lines(diff_text)
    return compare_change_lines(
        lines, tokenizer=tokenizer, thresholds=thresholds, path=path, delimiter=delimiter
    )


def compare_texts(
    before_text: str,
    after_text: str,
    *,
    thresholds: Optional[Thresholds] = None,
    path: Optional[str] = None,
    delimiter: Optional[str] = None,
) -> TableDiff:
    """Compare two whole versions of a delimited file, without a diff in between."""
    tokenizer = make_tokenizer(delimiter=delimiter, path=path, sample=before_text or after_text)
    before: Table = tokenizer(before_text)
    after: Table = tokenizer(after_text)
    return compare_tables(before, after, thresholds=thresholds, path=path)
