"""Rebuild the before/after versions of a file from its change lines."""

from __future__ import annotations

from typing import Iterable, Sequence

from .csv_tokenizer import Table, Tokenizer, tokenize
from .diff_parser import ChangeLine, ChangeStatus
from .logger import log

BEFORE_STATUSES = frozenset({ChangeStatus.REMOVED, ChangeStatus.UNCHANGED})
AFTER_STATUSES = frozenset({ChangeStatus.ADDED, ChangeStatus.UNCHANGED})


def split_streams(lines: Iterable[ChangeLine]) -> tuple[str, str]:
    """Return (before_text, after_text) rebuilt from change lines in input order."""
    before: list[str] = []
    after: list[str] = []
    for line in lines:
        if line.status in BEFORE_STATUSES:
            before.append(line.text)
        if line.status in AFTER_STATUSES:
            after.append(line.text)
    return "\n".join(before), "\n".join(after)


def build_tables(lines: Sequence[ChangeLine], tokenizer: Tokenizer = tokenize) -> tuple[Table, Table]:
    """Tokenize the before and after streams independently.

    Tokenizing each side on its own means a changed quote or separator can
    shift row boundaries on one side only; the reconciler matches rows by
    content so it does not depend on equal row counts.
    """
    before_text, after_text = split_streams(lines)
    before_table = tokenizer(before_text)
    after_table = tokenizer(after_text)
    log.debug(f"[SPLIT] before={len(before_table)} rows, after={len(after_table)} rows")
    return before_table, after_table
