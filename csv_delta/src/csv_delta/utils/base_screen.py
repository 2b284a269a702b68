"""Base screen classes shared by csv-delta screens.

Screens follow a Header + main content + Footer layout. Table screens also
get vim-like row navigation over their primary DataTable.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from rich.text import Text
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import DataTable

from csv_delta.utils.error_handling import log_ui_error
from csv_delta.widgets.footer import Footer
from csv_delta.widgets.header import Header


@dataclass
class ColumnConfig:
    """Configuration for a single table column."""

    title: Union[str, Text]
    key: str
    width: Optional[int] = None


@dataclass
class TableConfig:
    """Configuration for standardized DataTable setup."""

    zebra_stripes: bool = False
    cursor_type: str = "row"
    show_header: bool = True
    columns: List[ColumnConfig] = field(default_factory=list)

    def add_column(self, title: Union[str, Text], key: str, width: Optional[int] = None) -> None:
        """Add a column configuration."""
        self.columns.append(ColumnConfig(title, key, width))


def setup_data_table(table: DataTable, config: Optional[TableConfig] = None) -> None:
    """Apply a TableConfig to a DataTable, replacing any existing columns."""
    if config is None:
        config = TableConfig()

    try:
        table.zebra_stripes = config.zebra_stripes
        table.cursor_type = config.cursor_type
        table.show_header = config.show_header
        table.clear(columns=True)
        for col in config.columns:
            table.add_column(col.title, key=col.key, width=col.width)
    except (AttributeError, RuntimeError) as e:
        log_ui_error("table", "applying table setup", e)


class BaseNavigationMixin:
    """Mixin providing common table navigation actions.

    Screens using this mixin must have a `_table` attribute referencing
    their main DataTable widget.
    """

    def _move_to(self, row: int) -> None:
        table = getattr(self, '_table', None)
        if table is None or not table.row_count:
            return
        row = max(0, min(row, table.row_count - 1))
        try:
            table.move_cursor(row=row)
        except (AttributeError, RuntimeError) as e:
            log_ui_error("table", f"moving to row {row}", e)

    def _current_row(self) -> int:
        table = getattr(self, '_table', None)
        if table is None:
            return 0
        coord = table.cursor_coordinate
        return getattr(coord, 'row', 0) if coord is not None else 0

    def action_next_row(self):
        """Navigate to next row in the main table."""
        self._move_to(self._current_row() + 1)

    def action_prev_row(self):
        """Navigate to previous row in the main table."""
        self._move_to(self._current_row() - 1)

    def action_end(self):
        """Navigate to the last row in the main table."""
        table = getattr(self, '_table', None)
        if table is not None:
            self._move_to(table.row_count - 1)

    def action_home(self):
        """Navigate to the first row in the main table."""
        self._move_to(0)


class BaseScreen(Screen):
    """Base class for csv-delta screens.

    Subclasses implement compose_main_content() and get_footer_text().
    """

    def __init__(self, page_name: str):
        super().__init__()
        self.page_name = page_name
        self.title = f"csv-delta — {page_name}"

    def compose(self) -> ComposeResult:
        """Standard composition: header + main content + footer."""
        yield Header(page_name=self.page_name)
        yield from self.compose_main_content()
        yield Footer(text=self.get_footer_text())

    def compose_main_content(self) -> ComposeResult:
        """Define the main content area for this screen."""
        raise NotImplementedError("Subclasses must implement compose_main_content()")

    def get_footer_text(self) -> str:
        """Get footer text for this screen."""
        raise NotImplementedError("Subclasses must implement get_footer_text()")

    def update_footer(self) -> None:
        try:
            self.query_one(Footer).set_text(self.get_footer_text())
        except (AttributeError, RuntimeError) as e:
            log_ui_error("footer", "updating text", e)

    def action_go_back(self):
        """Pop this screen, or quit when it is the last one."""
        try:
            if len(self.app.screen_stack) > 2:
                self.app.pop_screen()
            else:
                self.app.exit()
        except (AttributeError, RuntimeError) as e:
            log_ui_error("screen", "going back", e)
