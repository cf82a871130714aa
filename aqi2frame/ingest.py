"""Reading the summary csv produced by the aggregation step."""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from .errorhandler import CsvFormatError, FileAccessError
from .formats import SUMMARY_HEADERS
from .logginghandler import get_global_log

if TYPE_CHECKING:
    from tqdm import tqdm

READ_MODE = "r"
WRITE_MODE = "w"


def check_file_access(path: str | Path, access_mode: str) -> Path:
    """Make sure ``path`` can be read (``"r"``) or written (``"w"``).

    Opening for writing uses append mode, so an existing file is left as is.

    Raises
    ------
    ValueError
        If ``access_mode`` is neither ``"r"`` nor ``"w"``.
    FileAccessError
        If the file cannot be opened in the requested mode.
    """
    if access_mode not in (READ_MODE, WRITE_MODE):
        raise ValueError(f"Invalid access mode: {access_mode!r}. Must be 'r' or 'w'.")
    path = Path(path)
    try:
        with open(path, "r" if access_mode == READ_MODE else "a"):
            pass
    except OSError as e:
        raise FileAccessError(f"Cannot open {path} for {'reading' if access_mode == READ_MODE else 'writing'}: {e}", path) from e
    return path


def read_fields(line: str) -> list[str]:
    try:
        reader = csv.reader([line], delimiter=",")
        return [f.strip() for f in next(reader)]
    except StopIteration:
        return []


def check_csv_header(input_buff: TextIO, path: str | Path = "<input>") -> tuple[str, ...]:
    """Read the header row and make sure it is a summary csv header.

    Raises
    ------
    CsvFormatError
        If the first line is not one of the accepted header rows.
    """
    header = tuple(read_fields(input_buff.readline()))
    if header not in SUMMARY_HEADERS:
        expected = " or ".join(",".join(h) for h in SUMMARY_HEADERS)
        raise CsvFormatError(f"Unexpected header {','.join(header)!r} in {path}. Expected {expected}.")
    return header


def iter_data_rows(input_buff: TextIO, pbar: tqdm | None = None) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_pos, fields)`` for each data row after the header.

    ``line_pos`` starts at 1 for the first data row. Blank lines are yielded
    too (as an empty field list) so positions match the file.
    """
    log = get_global_log()
    line_pos = 0
    for line in input_buff:
        line_pos += 1
        if pbar is not None:
            pbar.update(len(line.encode("utf-8")))
        yield line_pos, read_fields(line.rstrip("\r\n"))
    log(f"Read {line_pos} data rows.")
