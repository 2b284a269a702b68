from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable, TextIO

from .logger import log


@dataclass
class FileReadResult:
    """Result of file reading operations with consistent error handling."""
    success: bool
    content: str = ""
    encoding: str = ""
    error_message: str = ""


DEFAULT_ENCODINGS: tuple[str, ...] = (
    "utf-8",
    "utf-8-sig",
    "cp1252",
    "latin-1",
)


def read_text(
    path: str, encodings: Iterable[str] = DEFAULT_ENCODINGS, errors: str = "strict", ignore_on_last: bool = True
) -> tuple[str, str]:
    """
    Read a text file trying multiple encodings in order.

    Returns (text, used_encoding).
    If all strict attempts fail and ignore_on_last is True, retries the last
    encoding with errors="ignore" and logs a warning.
    """
    last_enc = None
    for enc in encodings:
        last_enc = enc
        try:
            # newline="" keeps quoted CR/LF inside CSV fields intact
            with open(path, encoding=enc, errors=errors, newline="") as f:
                return f.read(), enc
        except UnicodeDecodeError:
            continue
        except OSError as e:
            log.warning(f"[IO] Failed to read {path} with {enc}: {e}")
            return ("", "")
    if ignore_on_last and last_enc:
        try:
            with open(path, encoding=last_enc, errors="ignore", newline="") as f:
                log.warning(f"[IO] Decoded with ignore: {path} ({last_enc})")
                return f.read(), f"{last_enc}+ignore"
        except OSError as e:
            log.warning(f"[IO] Failed to read {path} with ignore mode: {e}")
    return ("", "")


def safe_read_file(file_path: str, default_content: str = "") -> FileReadResult:
    """Read a file without raising.

    Args:
        file_path: Path to the file to read
        default_content: Content to return on error (default: empty string)

    Returns:
        FileReadResult with success status, content, and error details
    """
    if not file_path:
        return FileReadResult(
            success=False,
            content=default_content,
            error_message="No file path provided"
        )

    content, encoding = read_text(file_path)
    if encoding:
        return FileReadResult(success=True, content=content, encoding=encoding)

    error_msg = f"Failed to read file: {file_path}"
    log.error(f"[IO] {error_msg}")
    return FileReadResult(
        success=False,
        content=default_content,
        error_message=error_msg
    )


def read_input(path: str | None, stdin: TextIO | None = None) -> FileReadResult:
    """Read diff input from a path, or from stdin when path is None or '-'."""
    if path in (None, "-"):
        stream = stdin if stdin is not None else sys.stdin
        try:
            return FileReadResult(success=True, content=stream.read(), encoding="stdin")
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"[IO] Failed reading stdin: {e}")
            return FileReadResult(success=False, error_message=f"Error reading stdin: {e}")
    return safe_read_file(path)
