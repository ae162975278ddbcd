"""
import_engine.csv_parser - Low-level file checks and CSV reading.

Responsibilities:
  • existence / readability checks with one-line messages
  • UTF-8 BOM removal
  • configurable delimiter and enclosure
  • yields (line_number, cells) tuples, blank lines included
"""

from __future__ import annotations

import csv
import io
import os
from pathlib import Path
from typing import Iterator, TextIO

from import_engine.errors import ImportSetupError


def check_dialect(delimiter: str, enclosure: str) -> None:
    """Both must be exactly one character."""
    if len(delimiter) != 1:
        raise ImportSetupError(f"Delimiter must be a single character, got '{delimiter}'.")
    if len(enclosure) != 1:
        raise ImportSetupError(f"Enclosure must be a single character, got '{enclosure}'.")
    if delimiter == enclosure:
        raise ImportSetupError("Delimiter and enclosure must differ.")


def open_source(path: str | Path) -> TextIO:
    """
    Read *path* as UTF-8 text for CSV reading or raise ImportSetupError
    with a single human-readable line.  The whole file is decoded up
    front, so a bad byte fails before anything is deleted or created.
    """
    path = Path(path)
    if not path.exists():
        raise ImportSetupError(f"File {path} does not exist.")
    if not path.is_file() or not os.access(path, os.R_OK):
        raise ImportSetupError(f"File {path} is not readable.")
    try:
        raw = path.read_bytes()
    except OSError:
        raise ImportSetupError(f"An error occurred opening file {path}.") from None
    try:
        text = _decode(raw)
    except UnicodeDecodeError:
        raise ImportSetupError(f"File {path} is not valid UTF-8 text.") from None
    return io.StringIO(text, newline="")


def _decode(raw: bytes) -> str:
    # Strip UTF-8 BOM
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    return raw.decode("utf-8")


def read_rows(
    fh: TextIO,
    delimiter: str = ",",
    enclosure: str = '"',
) -> Iterator[tuple[int, list[str]]]:
    """Yield (line_number, cells) starting at line 1."""
    reader = csv.reader(fh, delimiter=delimiter, quotechar=enclosure)
    for line, cells in enumerate(reader, start=1):
        yield line, cells
