"""Load comparisons from the inputs the command line accepts.

A run compares either a unified diff (file or stdin, possibly covering many
files) or a pair of before/after files. Each comparison is returned together
with its raw change lines so viewers can switch back to the line diff.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TextIO

from .config import PathsConfig
from .diff_parser import ChangeLine, changes_between, classify_diff_lines, is_tabular_path, split_file_diffs
from .io import read_input, safe_read_file
from .logger import log
from .pipeline import TableDiff, Thresholds, compare_change_lines, compare_texts


class SourceError(Exception):
    """Raised when an input cannot be read at all."""

    pass


@dataclass(frozen=True)
class LoadedDiff:
    """One file's comparison and the change lines it was built from."""

    diff: TableDiff
    raw: tuple[ChangeLine, ...]

    @property
    def label(self) -> str:
        return self.diff.path or "diff"


def load_diff_text(
    diff_text: str,
    *,
    include_all: bool = False,
    thresholds: Optional[Thresholds] = None,
    delimiter: Optional[str] = None,
) -> list[LoadedDiff]:
    """Compare every tabular file of a (possibly multi-file) unified diff.

    Sections without a file name are always kept; named files are kept only
    when they are CSV/TSV unless ``include_all`` is set.
    """
    loaded: list[LoadedDiff] = []
    for section in split_file_diffs(diff_text):
        if section.path is not None and not include_all and not is_tabular_path(section.path):
            log.debug(f"[SOURCE] Skipping non-tabular file {section.path}")
            continue
        lines = classify_diff_lines(section.text)
        if not lines:
            log.debug(f"[SOURCE] No change lines in {section.path or 'diff'}")
        diff = compare_change_lines(lines, thresholds=thresholds, path=section.path, delimiter=delimiter)
        loaded.append(LoadedDiff(diff=diff, raw=tuple(lines)))
    return loaded


def load_file_pair(
    before_path: str,
    after_path: str,
    *,
    thresholds: Optional[Thresholds] = None,
    delimiter: Optional[str] = None,
) -> LoadedDiff:
    """Compare two versions of a delimited file directly.

    Raises:
        SourceError: If either file cannot be read
    """
    before = safe_read_file(before_path)
    after = safe_read_file(after_path)
    for result in (before, after):
        if not result.success:
            raise SourceError(result.error_message)

    diff = compare_texts(
        before.content, after.content, thresholds=thresholds, path=after_path, delimiter=delimiter
    )
    return LoadedDiff(diff=diff, raw=tuple(changes_between(before.content, after.content)))


def load_inputs(
    paths: PathsConfig,
    *,
    include_all: bool = False,
    thresholds: Optional[Thresholds] = None,
    delimiter: Optional[str] = None,
    stdin: Optional[TextIO] = None,
) -> list[LoadedDiff]:
    """Load whatever ``paths`` describes.

    Raises:
        SourceError: If an input cannot be read
    """
    if paths.is_file_pair:
        return [load_file_pair(paths.before_path, paths.after_path, thresholds=thresholds, delimiter=delimiter)]

    result = read_input(paths.diff_path, stdin=stdin)
    if not result.success:
        raise SourceError(result.error_message)
    return load_diff_text(result.content, include_all=include_all, thresholds=thresholds, delimiter=delimiter)
