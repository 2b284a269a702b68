"""Row alignment between the before and after versions of a table.

Rows are aligned either by an identity key (the first field, when it looks
like one) or by position. Every aligned pair becomes a MatchedRow that is
classified as added, removed, modified or unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .logger import log

DEFAULT_KEY_OVERLAP = 0.30

Fields = tuple[str, ...]


class RowStatus(Enum):
    """Classification of one aligned row."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class AlignmentStrategy(Enum):
    """How rows were paired up."""

    KEY = "key"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class MatchedRow:
    """A before row and/or an after row that occupy the same visual line."""

    before: Optional[Fields]
    after: Optional[Fields]
    status: RowStatus

    def __post_init__(self):
        if self.before is None and self.after is None:
            raise ValueError("MatchedRow needs at least one side")
        if self.status is RowStatus.ADDED and self.before is not None:
            raise ValueError("added row cannot have a before side")
        if self.status is RowStatus.REMOVED and self.after is not None:
            raise ValueError("removed row cannot have an after side")
        if self.status in (RowStatus.MODIFIED, RowStatus.UNCHANGED):
            if self.before is None or self.after is None:
                raise ValueError(f"{self.status.value} row needs both sides")
            if (self.before == self.after) != (self.status is RowStatus.UNCHANGED):
                raise ValueError(f"{self.status.value} row does not match field equality")

    @classmethod
    def added(cls, row: Sequence[str]) -> MatchedRow:
        return cls(before=None, after=tuple(row), status=RowStatus.ADDED)

    @classmethod
    def removed(cls, row: Sequence[str]) -> MatchedRow:
        return cls(before=tuple(row), after=None, status=RowStatus.REMOVED)

    @classmethod
    def paired(cls, before: Sequence[str], after: Sequence[str]) -> MatchedRow:
        """Pair two rows; exact field-wise equality decides unchanged vs modified."""
        before_t, after_t = tuple(before), tuple(after)
        status = RowStatus.UNCHANGED if before_t == after_t else RowStatus.MODIFIED
        return cls(before=before_t, after=after_t, status=status)

    @property
    def width(self) -> int:
        """Number of columns spanned by the widest side."""
        return max(len(self.before or ()), len(self.after or ()))


def row_key(row: Sequence[str]) -> str:
    """Candidate identity key of a row: its first field."""
    return row[0] if row else ""


def has_identity_key(
    before: Sequence[Sequence[str]],
    after: Sequence[Sequence[str]],
    key_overlap: float = DEFAULT_KEY_OVERLAP,
) -> bool:
    """Decide whether the first column can be trusted as a row identity.

    Keys must be unique on each side, and the number of after keys also found
    in the before table must reach ``key_overlap`` of the larger table.
    """
    if not before or not after:
        return False

    before_keys = [row_key(row) for row in before]
    after_keys = [row_key(row) for row in after]
    if len(set(before_keys)) != len(before_keys):
        return False
    if len(set(after_keys)) != len(after_keys):
        return False

    known = set(before_keys)
    shared = sum(1 for key in after_keys if key in known)
    return shared / max(len(before), len(after)) >= key_overlap


def reconcile(
    before: Sequence[Sequence[str]],
    after: Sequence[Sequence[str]],
    *,
    key_overlap: float = DEFAULT_KEY_OVERLAP,
) -> list[MatchedRow]:
    """Align before and after rows into an ordered list of MatchedRow."""
    rows, _strategy = reconcile_with_strategy(before, after, key_overlap=key_overlap)
    return rows


def reconcile_with_strategy(
    before: Sequence[Sequence[str]],
    after: Sequence[Sequence[str]],
    *,
    key_overlap: float = DEFAULT_KEY_OVERLAP,
) -> tuple[list[MatchedRow], AlignmentStrategy]:
    """Like reconcile(), but also report which alignment was used."""
    if has_identity_key(before, after, key_overlap):
        strategy = AlignmentStrategy.KEY
        rows = _align_by_key(before, after)
    else:
        strategy = AlignmentStrategy.POSITIONAL
        rows = _align_by_position(before, after)

    log.debug(
        f"[RECONCILE] {strategy.value} alignment",
        extra={"before": len(before), "after": len(after), "rows": len(rows)},
    )
    return rows, strategy


def _align_by_key(before: Sequence[Sequence[str]], after: Sequence[Sequence[str]]) -> list[MatchedRow]:
    """Walk the before table, interleaving unmatched after rows near their position."""
    state = _initialize_key_state(before, after)

    for row in before:
        after_pos = state["after_index"].get(row_key(row))
        if after_pos is None:
            state["removed"].append(MatchedRow.removed(row))
            continue
        _flush_added(state, state["cursor"], after_pos)
        state["rows"].append(MatchedRow.paired(row, after[after_pos]))
        state["cursor"] = max(state["cursor"], after_pos + 1)

    state["rows"].extend(state["removed"])
    _flush_added(state, 0, len(after))
    return state["rows"]


def _initialize_key_state(before: Sequence[Sequence[str]], after: Sequence[Sequence[str]]) -> dict:
    """Initialize state for key-based alignment."""
    return {
        "rows": [],
        "removed": [],
        "after": after,
        "after_index": {row_key(row): pos for pos, row in enumerate(after)},
        "before_keys": {row_key(row) for row in before},
        "flushed": set(),
        "cursor": 0,
    }


def _flush_added(state: dict, start: int, end: int) -> None:
    """Emit after rows in [start, end) whose key has no before row."""
    for pos in range(start, end):
        if pos in state["flushed"]:
            continue
        row = state["after"][pos]
        if row_key(row) in state["before_keys"]:
            continue
        state["flushed"].add(pos)
        state["rows"].append(MatchedRow.added(row))


def _align_by_position(before: Sequence[Sequence[str]], after: Sequence[Sequence[str]]) -> list[MatchedRow]:
    """Pair row i with row i; the longer table's tail is added or removed."""
    rows: list[MatchedRow] = []
    for pos in range(max(len(before), len(after))):
        if pos >= len(after):
            rows.append(MatchedRow.removed(before[pos]))
        elif pos >= len(before):
            rows.append(MatchedRow.added(after[pos]))
        else:
            rows.append(MatchedRow.paired(before[pos], after[pos]))
    return rows
