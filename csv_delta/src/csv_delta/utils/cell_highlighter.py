"""Sub-cell change highlighting for modified rows.

For each column that differs between the two sides of a modified row, try to
describe the edit as a short list of unchanged/removed/added segments. Word
granularity is tried first, then character granularity; when neither keeps
enough of the original text the cell is left to whole-cell highlighting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import Callable, Optional, Sequence

from .diff_parser import ChangeStatus
from .logger import log
from .row_reconciler import MatchedRow, RowStatus

DEFAULT_WORD_RETENTION = 0.2
DEFAULT_CHAR_RETENTION = 0.6

_WORD_SPLIT_RE = re.compile(r"(\s+)")


@dataclass(frozen=True)
class ChangeSegment:
    """A run of text that is unchanged, only in before, or only in after."""

    status: ChangeStatus
    text: str


@dataclass(frozen=True)
class HighlightResult:
    """Outcome of one highlighting attempt.

    ``success`` False means no segment detail is available and the consumer
    should highlight the whole cell.
    """

    success: bool
    segments: tuple[ChangeSegment, ...] = ()
    strategy: str = ""

    @classmethod
    def found(cls, segments: Sequence[ChangeSegment], strategy: str) -> HighlightResult:
        return cls(success=True, segments=tuple(segments), strategy=strategy)

    @classmethod
    def none(cls) -> HighlightResult:
        return cls(success=False)

    @property
    def before(self) -> list[ChangeSegment]:
        return before_segments(self.segments)

    @property
    def after(self) -> list[ChangeSegment]:
        return after_segments(self.segments)


@dataclass(frozen=True)
class CellDiff:
    """One differing column of a modified row."""

    column: int
    before: str
    after: str
    result: HighlightResult = field(default_factory=HighlightResult.none)


Strategy = Callable[[str, str], Optional[list[ChangeSegment]]]


def tokenize_words(text: str) -> list[str]:
    """Split into words and whitespace runs; joining the tokens gives back ``text``."""
    return [tok for tok in _WORD_SPLIT_RE.split(text) if tok]


def diff_sequences(before: Sequence[str], after: Sequence[str]) -> list[ChangeSegment]:
    """Diff two token sequences into merged change segments."""
    segments: list[ChangeSegment] = []
    sm = SequenceMatcher(None, before, after, autojunk=False)
    for tag, i1, i2, j1, j2 in sm.get_opcodes():
        if tag == "equal":
            _append(segments, ChangeStatus.UNCHANGED, "".join(before[i1:i2]))
        elif tag == "delete":
            _append(segments, ChangeStatus.REMOVED, "".join(before[i1:i2]))
        elif tag == "insert":
            _append(segments, ChangeStatus.ADDED, "".join(after[j1:j2]))
        elif tag == "replace":
            _append(segments, ChangeStatus.REMOVED, "".join(before[i1:i2]))
            _append(segments, ChangeStatus.ADDED, "".join(after[j1:j2]))
    return segments


def _append(segments: list[ChangeSegment], status: ChangeStatus, text: str) -> None:
    """Append a segment, merging it into the previous one when the status matches."""
    if not text:
        return
    if segments and segments[-1].status is status:
        segments[-1] = ChangeSegment(status, segments[-1].text + text)
    else:
        segments.append(ChangeSegment(status, text))


def retained_ratio(segments: Sequence[ChangeSegment], before: str, after: str) -> float:
    """Unchanged characters relative to the longer of the two strings."""
    longest = max(len(before), len(after))
    if longest == 0:
        return 1.0
    kept = sum(len(seg.text) for seg in segments if seg.status is ChangeStatus.UNCHANGED)
    return kept / longest


def word_strategy(threshold: float = DEFAULT_WORD_RETENTION) -> Strategy:
    """Word-level diff, accepted when enough characters are kept."""

    def _word(before: str, after: str) -> Optional[list[ChangeSegment]]:
        segments = diff_sequences(tokenize_words(before), tokenize_words(after))
        if retained_ratio(segments, before, after) >= threshold:
            return segments
        return None

    _word.__name__ = "word"
    return _word


def char_strategy(threshold: float = DEFAULT_CHAR_RETENTION) -> Strategy:
    """Character-level diff for short, space-free values such as codes."""

    def _char(before: str, after: str) -> Optional[list[ChangeSegment]]:
        segments = diff_sequences(list(before), list(after))
        if retained_ratio(segments, before, after) >= threshold:
            return segments
        return None

    _char.__name__ = "char"
    return _char


def default_strategies(
    word_retention: float = DEFAULT_WORD_RETENTION, char_retention: float = DEFAULT_CHAR_RETENTION
) -> list[Strategy]:
    return [word_strategy(word_retention), char_strategy(char_retention)]


def diff_cells(
    before: str,
    after: str,
    *,
    word_retention: float = DEFAULT_WORD_RETENTION,
    char_retention: float = DEFAULT_CHAR_RETENTION,
    strategies: Optional[Sequence[Strategy]] = None,
) -> HighlightResult:
    """Compute change segments for one cell pair.

    The first strategy that returns segments wins. An empty value on either
    side skips detail entirely.
    """
    if before == "" or after == "":
        return HighlightResult.none()

    if strategies is None:
        strategies = default_strategies(word_retention, char_retention)

    for strategy in strategies:
        segments = strategy(before, after)
        if segments is not None:
            return HighlightResult.found(segments, strategy.__name__)
    return HighlightResult.none()


def before_segments(segments: Sequence[ChangeSegment]) -> list[ChangeSegment]:
    """Segments shown on the before side (added text omitted)."""
    return [seg for seg in segments if seg.status is not ChangeStatus.ADDED]


def after_segments(segments: Sequence[ChangeSegment]) -> list[ChangeSegment]:
    """Segments shown on the after side (removed text omitted)."""
    return [seg for seg in segments if seg.status is not ChangeStatus.REMOVED]


def field_at(row: Optional[Sequence[str]], column: int) -> str:
    """Field value at ``column``; missing fields of ragged rows read as empty."""
    if row is None or column >= len(row):
        return ""
    return row[column]


def highlight_row(
    matched: MatchedRow,
    *,
    word_retention: float = DEFAULT_WORD_RETENTION,
    char_retention: float = DEFAULT_CHAR_RETENTION,
) -> list[CellDiff]:
    """Return a CellDiff for every differing column of a modified row.

    Rows that are not modified have no cell detail and give an empty list.
    """
    if matched.status is not RowStatus.MODIFIED:
        return []

    strategies = default_strategies(word_retention, char_retention)
    cells: list[CellDiff] = []
    for column in range(matched.width):
        before = field_at(matched.before, column)
        after = field_at(matched.after, column)
        if before == after:
            continue
        result = diff_cells(before, after, strategies=strategies)
        cells.append(CellDiff(column=column, before=before, after=after, result=result))

    detailed = sum(1 for cell in cells if cell.result.success)
    log.debug(f"[HIGHLIGHT] {len(cells)} changed cells, {detailed} with segment detail")
    return cells
