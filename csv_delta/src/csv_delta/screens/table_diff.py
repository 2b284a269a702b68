"""Side-by-side table diff screen.

Shows the before table on the left and the after table on the right, one
visual row per matched row. Supports:
- One tab per compared file (h/l to switch)
- A raw line-diff view (toggle with 'r')
- Vim-like row navigation (j/k/g/G) with both tables' cursors kept in sync
- Live reload when the input files change on disk
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import DataTable, Static, Tab, Tabs

from csv_delta.utils.base_screen import BaseNavigationMixin, BaseScreen, TableConfig, setup_data_table
from csv_delta.utils.config import config
from csv_delta.utils.error_handling import log_generic_error, log_ui_error
from csv_delta.utils.logger import log
from csv_delta.utils.sources import LoadedDiff, SourceError
from csv_delta.utils.table_render import (
    AFTER,
    BEFORE,
    body_rows,
    header_labels,
    render_raw_diff,
    side_cells,
    summary_text,
)
from csv_delta.utils.watchdog import watch_files

Loader = Callable[[], list[LoadedDiff]]


class TableDiffScreen(BaseNavigationMixin, BaseScreen):
    """Before/after tables for one or more compared files."""

    BINDINGS = [
        ("q", "go_back", "Back"),
        ("r", "toggle_raw", "Raw Diff"),
        ("j", "next_row", "Down"),
        ("k", "prev_row", "Up"),
        ("g", "home", "Top"),
        ("G", "end", "Bottom"),
        ("h", "prev_tab", "Prev File"),
        ("l", "next_tab", "Next File"),
    ]

    DEFAULT_CSS = """
    #diff-root {
        width: 100%;
        height: 1fr;
    }
    #diff-summary {
        height: 1;
        padding: 0 1;
    }
    #diff-columns {
        width: 100%;
        height: 1fr;
    }
    #diff-columns > DataTable {
        width: 1fr;
        height: 1fr;
        margin: 0 1;
    }
    #raw-view {
        height: 1fr;
        display: none;
    }
    """

    def __init__(
        self,
        diffs: Sequence[LoadedDiff],
        *,
        loader: Optional[Loader] = None,
        watch_paths: Sequence[str] = (),
    ) -> None:
        super().__init__(page_name="Table Diff")
        self._diffs = list(diffs)
        self._loader = loader
        self._watch_paths = list(watch_paths)
        self._stop_watch: Optional[Callable[[], None]] = None
        self._index = 0
        self.show_raw = False
        # _table drives BaseNavigationMixin; the after table follows it
        self._table: Optional[DataTable] = None
        self._after_table: Optional[DataTable] = None
        self._tabs: Optional[Tabs] = None
        self._syncing = False

    @property
    def current(self) -> Optional[LoadedDiff]:
        if not self._diffs:
            return None
        return self._diffs[self._index]

    def compose_main_content(self) -> ComposeResult:
        self._tabs = Tabs(*self._build_tabs(), id="file-tabs")
        yield self._tabs
        with Vertical(id="diff-root"):
            yield Static("", id="diff-summary")
            with Horizontal(id="diff-columns"):
                self._table = DataTable(id="before-table")
                self._after_table = DataTable(id="after-table")
                yield self._table
                yield self._after_table
            with VerticalScroll(id="raw-view"):
                yield Static("", id="raw-text")

    def get_footer_text(self) -> str:
        view = "Table View" if self.show_raw else "Raw Diff"
        return (
            f" [orange1]q[/orange1] Back    [orange1]r[/orange1] {view}    "
            "[orange1]h/l[/orange1] Files    [orange1]j/k[/orange1] Rows"
        )

    def _build_tabs(self) -> list[Tab]:
        return [Tab(loaded.label, id=f"file-{pos}") for pos, loaded in enumerate(self._diffs)]

    def on_mount(self) -> None:
        self._populate()
        if self._table is not None:
            self.set_focus(self._table)
        if self._watch_paths and self._loader is not None:
            self._stop_watch = watch_files(
                self._watch_paths, self._on_files_changed, debounce_ms=config.debounce_ms
            )

    def on_unmount(self) -> None:
        if self._stop_watch is not None:
            self._stop_watch()
            self._stop_watch = None

    def _on_files_changed(self) -> None:
        """Watchdog callback; runs on the observer's timer thread."""
        try:
            self.app.call_from_thread(self.reload)
        except RuntimeError as e:
            log_generic_error("file watcher", "scheduling reload", e, prefix="WATCHDOG")

    async def reload(self) -> None:
        """Reload all inputs and redraw, keeping the selected file and row."""
        if self._loader is None:
            return
        try:
            diffs = self._loader()
        except SourceError as e:
            log.warning(f"[UI] Reload skipped: {e}")
            return

        row = self._current_row()
        label = self.current.label if self.current else None
        old_labels = [loaded.label for loaded in self._diffs]
        self._diffs = diffs
        labels = [loaded.label for loaded in diffs]
        self._index = labels.index(label) if label in labels else 0
        if labels != old_labels:
            await self._rebuild_tabs()
        self._populate()
        self._move_to(row)
        log.info(f"[UI] Reloaded {len(diffs)} comparison(s)")

    async def _rebuild_tabs(self) -> None:
        if self._tabs is None:
            return
        try:
            # Old tabs must be gone before tabs with the same ids are added
            await self._tabs.clear()
            for tab in self._build_tabs():
                await self._tabs.add_tab(tab)
            if self._diffs:
                self._tabs.active = f"file-{self._index}"
        except (AttributeError, RuntimeError, ValueError) as e:
            log_ui_error("file tabs", "rebuilding", e)

    def _populate(self) -> None:
        """Fill both tables, the summary line and the raw view for the current file."""
        loaded = self.current
        summary = self.query_one("#diff-summary", Static)
        raw_text = self.query_one("#raw-text", Static)
        if loaded is None:
            summary.update("No tabular changes found")
            raw_text.update("")
            for table in (self._table, self._after_table):
                if table is not None:
                    setup_data_table(table, TableConfig())
            return

        diff = loaded.diff
        summary.update(summary_text(diff) if not diff.is_empty else "No differences to display")
        raw_text.update(render_raw_diff(loaded.raw))
        width = diff.width

        for table, side in ((self._table, BEFORE), (self._after_table, AFTER)):
            if table is None:
                continue
            table_config = TableConfig()
            for column, label in enumerate(header_labels(diff)):
                table_config.add_column(label, key=f"{side}-{column}")
            setup_data_table(table, table_config)
            for row in body_rows(diff):
                table.add_row(*side_cells(row, side, width, row_style=True))

    def _select(self, index: int) -> None:
        if not self._diffs:
            return
        self._index = index % len(self._diffs)
        self._populate()
        if self._tabs is not None:
            try:
                self._tabs.active = f"file-{self._index}"
            except (AttributeError, ValueError) as e:
                log_ui_error("file tabs", "activating tab", e)

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = getattr(event.tab, "id", None) or ""
        if not tab_id.startswith("file-"):
            return
        index = int(tab_id.split("-", 1)[1])
        if index != self._index:
            self._index = index
            self._populate()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        """Keep both tables' cursors on the same visual row."""
        if self._syncing:
            return
        source = event.data_table
        other = self._after_table if source is self._table else self._table
        if other is None or other.cursor_row == event.cursor_row:
            return
        self._syncing = True
        try:
            other.move_cursor(row=event.cursor_row)
        except (AttributeError, RuntimeError) as e:
            log_ui_error("table", "syncing cursor", e)
        finally:
            self._syncing = False

    def action_toggle_raw(self) -> None:
        """Switch between the table view and the raw line diff."""
        self.show_raw = not self.show_raw
        try:
            self.query_one("#diff-columns").display = not self.show_raw
            self.query_one("#raw-view").display = self.show_raw
        except (AttributeError, RuntimeError) as e:
            log_ui_error("raw view", "toggling", e)
        self.update_footer()

    def action_prev_tab(self) -> None:
        self._select(self._index - 1)

    def action_next_tab(self) -> None:
        self._select(self._index + 1)
