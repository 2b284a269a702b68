"""Delimited-text tokenizer for csv-delta.

Splits a block of CSV/TSV text into rows of fields with the standard-library
``csv`` reader. Empty lines are skipped and malformed records are logged and
skipped so that one bad line never aborts a comparison.
"""

from __future__ import annotations

import csv
import io
from typing import Callable, Optional

from .error_handling import log_parse_error
from .logger import log

Row = list[str]
Table = list[Row]
Tokenizer = Callable[[str], Table]

DEFAULT_DELIMITER = ","
SNIFF_DELIMITERS = ",\t;|"
_SNIFF_SAMPLE_CHARS = 4096


def delimiter_for_path(path: Optional[str]) -> Optional[str]:
    """Return the delimiter implied by a file extension, if any."""
    if not path:
        return None
    lowered = path.lower()
    if lowered.endswith(".tsv"):
        return "\t"
    if lowered.endswith(".csv"):
        return ","
    return None


def sniff_delimiter(text: str, default: str = DEFAULT_DELIMITER) -> str:
    """Guess the delimiter of a text sample, falling back to ``default``."""
    sample = text[:_SNIFF_SAMPLE_CHARS]
    if not sample.strip():
        return default
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS)
    except csv.Error:
        return default
    return dialect.delimiter


def tokenize(text: str, delimiter: str = DEFAULT_DELIMITER, source: str = "input") -> Table:
    """Split delimited text into rows of fields.

    An empty string gives zero rows. Row order and field order are preserved.
    """
    if not text:
        return []

    rows: Table = []
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            # The reader resets its state, so iteration can continue on the next record
            log_parse_error(source, reader.line_num, e)
            continue
        if not row:
            continue
        rows.append(row)

    log.debug(f"[CSV] Tokenized {source}: {len(rows)} rows")
    return rows


def make_tokenizer(
    delimiter: Optional[str] = None, path: Optional[str] = None, sample: Optional[str] = None
) -> Tokenizer:
    """Build a ``tokenize(text)`` callable for one file.

    The delimiter comes from, in order: the explicit argument, the file
    extension, or sniffing ``sample``. Both sides of a comparison must share
    one tokenizer so they are split with the same delimiter.
    """
    fixed = delimiter or delimiter_for_path(path)
    if fixed is None:
        fixed = sniff_delimiter(sample) if sample else DEFAULT_DELIMITER
    source = path or "input"

    def _tokenize(text: str) -> Table:
        return tokenize(text, delimiter=fixed, source=source)

    return _tokenize
