"""Rich rendering of table comparisons.

Turns a TableDiff into Rich ``Text`` cells and a side-by-side ``Table``. An
unchanged first row supplies the column labels; every other row, including a
changed first row, is rendered as body.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich.table import Table
from rich.text import Text

from .cell_highlighter import ChangeSegment, after_segments, before_segments, field_at
from .config import config
from .diff_parser import ChangeLine, ChangeStatus
from .pipeline import RowComparison, TableDiff
from .row_reconciler import RowStatus

BEFORE = "before"
AFTER = "after"

ROW_STYLES = {
    RowStatus.ADDED: "on #12261e",
    RowStatus.REMOVED: "on #2d1416",
    RowStatus.MODIFIED: "on #2b2610",
    RowStatus.UNCHANGED: "",
}
CHANGED_CELL_STYLE = {
    BEFORE: "bold #ffb3b3 on #4d1f24",
    AFTER: "bold #b3ffc6 on #1f4d2e",
}
SEGMENT_STYLE = {
    ChangeStatus.REMOVED: "bold white on #a3262f",
    ChangeStatus.ADDED: "bold white on #1f7a3a",
    ChangeStatus.UNCHANGED: "",
}
PLACEHOLDER_STYLE = "dim"
SEPARATOR = Text("│", style="dim", justify="center")


def _clamp(text: Text, limit: Optional[int]) -> Text:
    if limit and len(text) > limit:
        text.truncate(limit, overflow="ellipsis")
    return text


def render_segments(segments: Sequence[ChangeSegment], side: str, limit: Optional[int] = None) -> Text:
    """Render one side of a cell's segments, highlighting the changed runs."""
    visible = before_segments(segments) if side == BEFORE else after_segments(segments)
    text = Text()
    for seg in visible:
        text.append(seg.text, style=SEGMENT_STYLE[seg.status])
    return _clamp(text, limit)


def render_cell(row: RowComparison, column: int, side: str, limit: Optional[int] = None) -> Text:
    """Render a single cell of one side of a row.

    Changed cells with segment detail show highlighted spans; changed cells
    without detail are highlighted as a whole.
    """
    if limit is None:
        limit = config.max_cell_chars
    fields = row.matched.before if side == BEFORE else row.matched.after
    if fields is None:
        return Text("")

    value = field_at(fields, column)
    cell = row.cell(column)
    if cell is None:
        return _clamp(Text(value), limit)
    if cell.result.success:
        return render_segments(cell.result.segments, side, limit)
    return _clamp(Text(value, style=CHANGED_CELL_STYLE[side]), limit)


def side_cells(
    row: RowComparison, side: str, width: int, limit: Optional[int] = None, row_style: bool = False
) -> list[Text]:
    """All cells of one side of a row, padded to ``width`` columns.

    With ``row_style`` each plain cell also carries the row's background, for
    widgets that cannot style a whole row.
    """
    cells = [render_cell(row, column, side, limit) for column in range(width)]
    if row_style:
        for cell in cells:
            if not cell.style:
                cell.style = ROW_STYLES[row.status]
    return cells


def has_label_row(diff: TableDiff) -> bool:
    """True when the first row is unchanged and can serve as the column header.

    A first row that was added, removed or modified carries a change of its own
    (a hunk that starts mid-file, a renamed column), so it stays in the body.
    """
    return not diff.is_empty and diff.rows[0].status is RowStatus.UNCHANGED


def body_rows(diff: TableDiff) -> tuple[RowComparison, ...]:
    """Rows shown below the header; everything except a label row."""
    return diff.rows[1:] if has_label_row(diff) else diff.rows


def header_labels(diff: TableDiff) -> list[str]:
    """Column labels taken from an unchanged first row, falling back to column numbers."""
    width = diff.width
    if diff.is_empty:
        return []
    fields = diff.rows[0].matched.before if has_label_row(diff) else ()
    return [field_at(fields, column) or f"#{column + 1}" for column in range(width)]


def build_side_by_side(diff: TableDiff, limit: Optional[int] = None) -> Table:
    """Build a Rich table with the before columns on the left and after on the right.

    Each matched row becomes one visual row; the side without data gets blank
    placeholder cells.
    """
    width = diff.width
    table = Table(
        title=diff.path or None,
        caption=summary_text(diff),
        show_lines=False,
        expand=False,
    )
    if diff.is_empty:
        table.add_column("No differences to display", style=PLACEHOLDER_STYLE)
        return table

    for label in header_labels(diff):
        table.add_column(Text(label, style="bold #ff8787"), overflow="fold")
    table.add_column(SEPARATOR.copy(), width=1)
    for label in header_labels(diff):
        table.add_column(Text(label, style="bold #87ff87"), overflow="fold")

    for row in body_rows(diff):
        table.add_row(
            *side_cells(row, BEFORE, width, limit),
            SEPARATOR.copy(),
            *side_cells(row, AFTER, width, limit),
            style=ROW_STYLES[row.status],
        )
    return table


def summary_text(diff: TableDiff) -> Text:
    """One-line summary of row counts and the alignment used."""
    counts = diff.summary()
    text = Text()
    text.append(f"+{counts[RowStatus.ADDED.value]} added", style="green")
    text.append("  ")
    text.append(f"-{counts[RowStatus.REMOVED.value]} removed", style="red")
    text.append("  ")
    text.append(f"~{counts[RowStatus.MODIFIED.value]} modified", style="yellow")
    text.append(f"  ({diff.strategy.value} alignment)", style="dim")
    return text


def render_raw_diff(lines: Iterable[ChangeLine]) -> Text:
    """Render change lines as a colored raw line diff."""
    prefixes = {ChangeStatus.ADDED: "+", ChangeStatus.REMOVED: "-", ChangeStatus.UNCHANGED: " "}
    styles = {ChangeStatus.ADDED: "green", ChangeStatus.REMOVED: "red", ChangeStatus.UNCHANGED: ""}
    text = Text()
    for line in lines:
        text.append(f"{prefixes[line.status]}{line.text}\n", style=styles[line.status])
    text.rstrip()
    return text
