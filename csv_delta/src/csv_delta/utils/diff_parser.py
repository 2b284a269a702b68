"""Unified diff parsing for csv-delta.

Turns raw unified-diff text into typed change lines, and splits a multi-file
``git diff`` into one section per file so tabular files can be picked out.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from enum import Enum
from typing import Optional

from .logger import log


class ChangeStatus(Enum):
    """Status of a single diff line or cell segment."""

    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class ChangeLine:
    """One line of a line-level change log."""

    status: ChangeStatus
    text: str


@dataclass(frozen=True)
class FileDiff:
    """The diff text belonging to one file of a (possibly multi-file) diff."""

    path: Optional[str]
    text: str


TABULAR_EXTENSIONS: tuple[str, ...] = (".csv", ".tsv")

_METADATA_PREFIXES = ("@@", "---", "+++", "\\")
_PREFIX_STATUS = {
    "+": ChangeStatus.ADDED,
    "-": ChangeStatus.REMOVED,
    " ": ChangeStatus.UNCHANGED,
}

_GIT_HEADER_RE = re.compile(r'^diff --git "?a/(?P<a>.+?)"? "?b/(?P<b>.+?)"?$')
_DEV_NULL = "/dev/null"


def split_lines(text: str) -> list[str]:
    """Split text on line feeds only, dropping a CR before each LF.

    Unlike str.splitlines(), characters such as U+2028 or form feed stay inside
    their line, so field values that contain them are not cut apart.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def classify_diff_lines(diff_text: str) -> list[ChangeLine]:
    """Classify each line of a unified diff as added, removed or unchanged.

    Hunk headers, file headers and the no-newline marker are dropped, as is
    any line that carries none of the ``+``, ``-`` or space prefixes. The
    result may be empty; that simply means nothing could be classified.
    """
    lines: list[ChangeLine] = []
    dropped = 0
    for raw in split_lines(diff_text):
        change = classify_line(raw)
        if change is None:
            dropped += 1
            continue
        lines.append(change)
    log.debug(f"[DIFF] Classified {len(lines)} lines, dropped {dropped}")
    return lines


def classify_line(raw: str) -> ChangeLine | None:
    """Classify a single diff line, or return None for metadata/noise."""
    if not raw or raw.startswith(_METADATA_PREFIXES):
        return None
    status = _PREFIX_STATUS.get(raw[0])
    if status is None:
        return None
    return ChangeLine(status=status, text=raw[1:])


def split_file_diffs(diff_text: str) -> list[FileDiff]:
    """Split a multi-file diff into per-file sections.

    Sections start at ``diff --git`` headers. Plain ``diff -u`` output without
    git headers is split on ``---``/``+++`` header pairs instead. Text without
    any file header comes back as a single section with ``path=None``.
    """
    lines = split_lines(diff_text)
    starts = [i for i, line in enumerate(lines) if line.startswith("diff --git ")]
    if not starts:
        starts = _plain_header_starts(lines)
    if not starts:
        return [FileDiff(path=None, text=diff_text)]

    sections: list[FileDiff] = []
    bounds = starts + [len(lines)]
    for start, end in zip(bounds, bounds[1:]):
        chunk = lines[start:end]
        sections.append(FileDiff(path=_section_path(chunk), text="\n".join(chunk)))
    log.debug(f"[DIFF] Split diff into {len(sections)} file sections")
    return sections


def _plain_header_starts(lines: list[str]) -> list[int]:
    starts = []
    for i, line in enumerate(lines[:-1]):
        if line.startswith("--- ") and lines[i + 1].startswith("+++ "):
            starts.append(i)
    return starts


def _header_path(line: str) -> str | None:
    # "+++ b/path/to/file.csv\t2024-01-01 ..." -> "path/to/file.csv"
    path = line[4:].split("\t", 1)[0].strip().strip('"')
    if not path or path == _DEV_NULL:
        return None
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path


def _section_path(chunk: list[str]) -> str | None:
    """Pick the file path for one section: new name first, then old name, then git header."""
    old_path = new_path = None
    for line in chunk:
        if line.startswith("@@"):
            break
        if line.startswith("+++ "):
            new_path = _header_path(line)
        elif line.startswith("--- "):
            old_path = _header_path(line)
    if new_path or old_path:
        return new_path or old_path

    match = _GIT_HEADER_RE.match(chunk[0]) if chunk else None
    if match:
        return match.group("b")
    return None


def changes_between(before_text: str, after_text: str) -> list[ChangeLine]:
    """Build change lines for two whole texts, as a line diff would show them.

    Replaced blocks list their removed lines before their added lines.
    """
    old_lines = split_lines(before_text)
    new_lines = split_lines(after_text)
    changes: list[ChangeLine] = []
    for tag, i1, i2, j1, j2 in SequenceMatcher(None, old_lines, new_lines, autojunk=False).get_opcodes():
        if tag == "equal":
            changes.extend(ChangeLine(ChangeStatus.UNCHANGED, line) for line in old_lines[i1:i2])
            continue
        changes.extend(ChangeLine(ChangeStatus.REMOVED, line) for line in old_lines[i1:i2])
        changes.extend(ChangeLine(ChangeStatus.ADDED, line) for line in new_lines[j1:j2])
    return changes


def is_tabular_path(path: str | None) -> bool:
    """True when the path names a CSV or TSV file."""
    if not path:
        return False
    return path.lower().endswith(TABULAR_EXTENSIONS)
