import argparse
import sys
from functools import partial

from rich.console import Console
from textual.app import App

from csv_delta.screens.table_diff import TableDiffScreen
from csv_delta.utils.config import PathsConfig, config
from csv_delta.utils.logger import log
from csv_delta.utils.pipeline import Thresholds
from csv_delta.utils.sources import LoadedDiff, SourceError, load_inputs
from csv_delta.utils.table_render import build_side_by_side
from csv_delta.utils.validation import ValidationError, validate_delimiter, validate_paths_config


class TableDiffApp(App):
    """Textual app hosting the side-by-side table diff."""

    TITLE = "csv-delta"
    DEFAULT_CSS = """
    Screen {
        background: $surface-darken-3;
        width: 100%;
        height: 100%;
    }
    """

    def __init__(self, diffs: list[LoadedDiff], loader=None, watch_paths=()):
        """Initialize the app.

        Args:
            diffs: Comparisons to show, one tab each
            loader: Callable that reloads the comparisons, used for live updates
            watch_paths: Files whose changes trigger a reload
        """
        super().__init__()
        self.diffs = diffs
        self.loader = loader
        self.watch_paths = list(watch_paths)

    def on_mount(self):
        self.push_screen(TableDiffScreen(self.diffs, loader=self.loader, watch_paths=self.watch_paths))


def _create_argument_parser():
    """Create and configure the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="csv-delta",
        description="csv-delta: show a unified diff of CSV/TSV files as aligned, highlighted tables",
    )
    parser.add_argument('diff', nargs='?', help="Unified diff file ('-' or omitted reads stdin)")
    parser.add_argument('--before', type=str, help='Old version of a CSV/TSV file (use with --after)')
    parser.add_argument('--after', type=str, help='New version of a CSV/TSV file (use with --before)')
    parser.add_argument('--delimiter', type=str, help="Field delimiter, e.g. ',' or 'tab' (default: detect)")
    parser.add_argument('--all-files', action='store_true', help='Also show files that are not .csv/.tsv')
    parser.add_argument('--plain', action='store_true', help='Print tables to the terminal instead of the viewer')
    parser.add_argument('--watch', action='store_true', help='Reload the viewer when input files change')
    return parser


def _validate_configuration(args):
    """Validate user inputs; print a message and exit with status 1 on failure."""
    try:
        paths = validate_paths_config(PathsConfig.from_args(args).merge_with_env())
        delimiter = validate_delimiter(args.delimiter)
        if args.watch and not (paths.is_file_pair or (paths.diff_path and paths.diff_path != "-")):
            raise ValidationError("--watch needs a diff file or --before/--after files, not stdin")
    except ValidationError as e:
        log.error(f"Configuration validation failed: {e}")
        sys.stderr.write(f"Configuration Error: {e}\n")
        sys.stderr.write("Use --help for usage information.\n")
        sys.exit(1)
    return paths, delimiter


def _watch_paths(paths: PathsConfig) -> list[str]:
    if paths.is_file_pair:
        return [paths.before_path, paths.after_path]
    return [paths.diff_path]


def _print_plain(diffs: list[LoadedDiff], console: Console) -> None:
    """Print one Rich table per compared file."""
    if not diffs:
        console.print("No tabular changes found.")
        return
    for loaded in diffs:
        console.print(build_side_by_side(loaded.diff))
        console.print()


def _execute_mode(args, paths: PathsConfig, delimiter):
    """Load the comparisons and show them in the requested mode."""
    loader = partial(
        load_inputs,
        paths,
        include_all=args.all_files,
        thresholds=Thresholds.from_config(config),
        delimiter=delimiter,
    )
    try:
        diffs = loader()
    except SourceError as e:
        log.error(f"Failed to load input: {e}")
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(1)

    reads_stdin = not paths.is_file_pair and paths.diff_path in (None, "-")
    if reads_stdin and not args.plain and not sys.stdin.isatty():
        log.info("[CLI] Diff was piped on stdin; printing tables instead of starting the viewer")
        args.plain = True

    if args.plain:
        _print_plain(diffs, Console())
        return

    watch_paths = _watch_paths(paths) if args.watch else []
    TableDiffApp(diffs, loader=None if reads_stdin else loader, watch_paths=watch_paths).run()


def main(argv=None):
    """Main entry point for csv-delta."""
    parser = _create_argument_parser()
    args = parser.parse_args(argv)

    log.debug(f"[CLI] {config!r}")

    paths, delimiter = _validate_configuration(args)
    _execute_mode(args, paths, delimiter)


if __name__ == "__main__":
    main()
