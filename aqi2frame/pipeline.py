from __future__ import annotations

import datetime
from collections.abc import Iterable, Sequence
from pathlib import Path

from .errorhandler import ErrorCode, record_error
from .formats import Config, ConversionResult, Rejection
from .ingest import READ_MODE, WRITE_MODE, check_csv_header, check_file_access, iter_data_rows
from .logginghandler import get_global_log
from .output import FrameWriter
from .packet import assemble_fields
from .warninghandler import get_global_warn


def convert_rows(
    rows: Iterable[tuple[int, Sequence[str]]],
    writer: FrameWriter,
    tz: str | datetime.tzinfo | None = None,
    little_endian: bool | None = None,
) -> ConversionResult:
    """Encode rows in order and write one hex line per frame.

    Stops at the first rejected row. Lines already written stay written.

    Parameters
    ----------
    rows : iterable of (int, sequence of str)
        Data line position (1 = first row after the header) and the text fields.
    writer : FrameWriter
        Destination for the encoded frames.
    tz : str | tzinfo | None, optional
        Zone for the timestamp conversion. Default is None (host local time).

    Returns
    -------
    ConversionResult
        ``completed`` is False if a row was rejected, with its position in ``failed_line``.
    """
    log = get_global_log()

    for line_pos, fields in rows:
        result = assemble_fields(fields, tz, line_pos, little_endian)
        if isinstance(result, Rejection):
            log(f"Rejected line {line_pos} ({result.reason.name}). Stopping after {writer.frames_written} frames.")
            return ConversionResult(
                completed=False,
                frames_written=writer.frames_written,
                failed_line=line_pos,
                reason=result.reason,
            )
        writer.write(result)

    return ConversionResult(completed=True, frames_written=writer.frames_written)


def execute_config(cfg: Config) -> ConversionResult:
    """Run one conversion: access checks, header check, encode, report.

    A rejected row is recorded in ``cfg.error_log`` as a data-missing error.
    Access and header problems are raised as ConversionError subclasses.
    """
    warn = get_global_warn()
    log = get_global_log()

    input_path = check_file_access(cfg.input_file, READ_MODE)
    output_path = check_file_access(cfg.output_file, WRITE_MODE)

    if cfg.tz is None:
        warn("Timestamps are converted using the host's local timezone. Pass a timezone to get reproducible frames across hosts.")

    with open(input_path, "r", encoding="utf-8-sig", newline="") as input_buff:
        check_csv_header(input_buff, input_path)
        with open(output_path, "w", newline="\n") as output_buff:
            writer = FrameWriter(output_buff, name=str(output_path))
            result = convert_rows(iter_data_rows(input_buff, cfg.pbar), writer, cfg.tz)
            writer.finish()

    if cfg.pbar is not None and result.completed:
        cfg.pbar.n = cfg.pbar.total
        cfg.pbar.refresh()

    if not result.completed:
        record_error(ErrorCode.DATA_MISSING, cfg.error_log, line_pos=result.failed_line)
    else:
        log(f"Converted {result.frames_written} records from {Path(input_path).name}.")
    return result
