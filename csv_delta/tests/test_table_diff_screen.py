"""Smoke tests for the side-by-side table diff screen."""

import pytest
from textual.widgets import DataTable, Tabs

from csv_delta.entry_points import TableDiffApp
from csv_delta.screens.table_diff import TableDiffScreen
from csv_delta.utils.sources import load_diff_text


@pytest.mark.asyncio
async def test_table_diff_navigation_pilot(multi_file_diff):
    diffs = load_diff_text(multi_file_diff)

    async with TableDiffApp(diffs).run_test() as pilot:
        await pilot.pause()
        screen = pilot.app.screen
        assert isinstance(screen, TableDiffScreen)

        before = screen.query_one("#before-table", DataTable)
        after = screen.query_one("#after-table", DataTable)
        # people.csv: header row plus four body rows
        assert before.row_count == 4
        assert after.row_count == 4

        # Row movement keeps both tables on the same line
        await pilot.press("j", "j")
        await pilot.pause()
        assert before.cursor_row == 2
        assert after.cursor_row == 2

        await pilot.press("G")
        await pilot.pause()
        assert after.cursor_row == 3
        await pilot.press("g", "k")
        await pilot.pause()
        assert before.cursor_row == 0

        # Raw view toggles on and off
        await pilot.press("r")
        assert screen.show_raw
        assert screen.query_one("#raw-view").display
        await pilot.press("r")
        assert not screen.show_raw

        # Switch to the TSV file and back
        await pilot.press("l")
        await pilot.pause()
        assert screen.current.label == "scores.tsv"
        assert screen.query_one("#file-tabs", Tabs).active == "file-1"
        assert before.row_count == 1
        await pilot.press("h")
        await pilot.pause()
        assert screen.current.label == "people.csv"

        await pilot.press("q")


@pytest.mark.asyncio
async def test_table_diff_reload_keeps_selection(multi_file_diff, people_diff):
    diffs = load_diff_text(multi_file_diff)
    sources = [diffs]

    def loader():
        return sources[-1]

    async with TableDiffApp(diffs, loader=loader).run_test() as pilot:
        await pilot.pause()
        screen = pilot.app.screen
        await pilot.press("l")
        await pilot.pause()
        assert screen.current.label == "scores.tsv"

        # Reload with the TSV gone: selection falls back to the first file
        sources.append(load_diff_text(people_diff))
        await screen.reload()
        await pilot.pause()
        assert screen.current.label == "people.csv"
        assert screen.query_one("#before-table", DataTable).row_count == 4


@pytest.mark.asyncio
async def test_table_diff_empty_input():
    async with TableDiffApp([]).run_test() as pilot:
        await pilot.pause()
        screen = pilot.app.screen
        assert screen.current is None
        assert screen.query_one("#before-table", DataTable).row_count == 0
        await pilot.press("j", "l", "r")
        await pilot.press("q")


@pytest.mark.asyncio
async def test_table_diff_mid_file_hunk_keeps_first_row():
    diffs = load_diff_text("@@ -3 +3 @@\n-3,c\n+3,c2\n")

    async with TableDiffApp(diffs).run_test() as pilot:
        await pilot.pause()
        screen = pilot.app.screen
        # The only row is a change, so it is a body row under numbered columns
        assert screen.query_one("#before-table", DataTable).row_count == 1
        assert screen.query_one("#after-table", DataTable).row_count == 1
        await pilot.press("q")
