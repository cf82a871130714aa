"""
Python tool to convert air-quality summary csv files into hex-encoded telemetry frames.

Can be used as a module or as a standalone script.

To use as a module, import the `aqi2frame` function and call it with appropriate parameters.
To use as a standalone script, run `python -m aqi2frame INPUT OUTPUT`.
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from .errorhandler import ConversionError, FileAccessError, InvalidArgumentError, check_log_access, record_exception
from .formats import DEFAULT_ERROR_LOG, Config, ConversionResult
from .logginghandler import set_global_log
from .pipeline import execute_config
from .timestamps import resolve_timezone
from .warninghandler import get_global_warn, set_global_warn


def aqi2frame(
        input_file: str | Path,
        output_file: str | Path,
        error_log: str | Path = DEFAULT_ERROR_LOG,
        tz: str | None = None,
        pbar: bool = False,
        verbose: int = 1,
) -> ConversionResult:
    """Primary API function to encode a summary csv file as telemetry frames.

    Parameters
    ----------
    input_file : str | Path
        Path to the summary csv (header ``id,time,value,aqi,pollution`` or ``id,time,value,aqi``).
    output_file : str | Path
        Path to the output text file. One line of space-separated hex per frame.
    error_log : str | Path, optional
        File that timestamped error entries are appended to. Default is ``aqi2frame.log``.
    tz : str | None, optional
        IANA timezone used to turn timestamps into epoch seconds. Default is None (host local time).
        Frames depend on the timezone, so pin it when output has to be reproducible across hosts.
    pbar : bool, optional
        Print a progress bar to stdout (requires tqdm). Default is False.
    verbose: int, optional
        level of verbosity for warnings and informational messages. Default is 1.
        0: no warnings or informational messages will be shown.
        1: show warnings (default)
        2: show all warnings and logs
        3: write all warnings and logs (except pbar) to a file named .aqi2frame_*.log next to the output file.

    Returns
    -------
    ConversionResult
        Whether every record was converted, how many frames were written, and
        the data line position of the first rejected record if there was one.

    Raises
    ------
    ConversionError
        For unreadable/unwritable files, a wrong csv header, or an unknown timezone.
        The matching entry is appended to ``error_log`` before raising.
    """
    log_file_buffer = open_run_log(output_file, error_log) if verbose == 3 else None
    set_global_warn(mode="api", verbose=verbose, logfile_buffer=log_file_buffer)
    set_global_log(mode="api", verbose=verbose, logfile_buffer=log_file_buffer)

    try:
        return main(
            input_file=input_file,
            output_file=output_file,
            error_log=error_log,
            tz=tz,
            pbar=pbar,
        )
    finally:
        if log_file_buffer is not None:
            log_file_buffer.close()


def open_run_log(output_file: str | Path, error_log: str | Path = DEFAULT_ERROR_LOG) -> TextIO:
    """Open the next free .aqi2frame_N.log next to the output file.

    An output directory that cannot be written is recorded in ``error_log``
    like any other output access problem.
    """
    out_dir = Path(output_file).parent
    try:
        log_file_number = len(list(out_dir.glob('.aqi2frame_*.log')))+1
        return open(out_dir / f".aqi2frame_{log_file_number}.log", "w")
    except OSError as e:
        err = FileAccessError(f"Cannot create a run log in {out_dir}: {e}", output_file)
        if check_log_access(error_log):
            record_exception(err, error_log)
        raise err from e


def main(
    input_file: str | Path,
    output_file: str | Path,
    error_log: str | Path = DEFAULT_ERROR_LOG,
    tz: str | None = None,
    pbar: bool = False,
) -> ConversionResult:
    warn = get_global_warn()

    if not check_log_access(error_log):
        raise FileAccessError(f"Cannot access {error_log} to record errors.", error_log)

    input_file = Path(input_file)
    progress = None
    try:
        if tz is not None:
            try:
                resolve_timezone(tz)
            except ValueError as e:
                raise InvalidArgumentError(str(e)) from e

        if pbar:
            try:
                from tqdm import tqdm
                total_bytes_to_read = input_file.stat().st_size if input_file.exists() else None
                progress = tqdm(
                    total=total_bytes_to_read,
                    unit="B", unit_scale=True, unit_divisor=1024,
                    desc="Encoding frames",
                    mininterval=1.0,
                )
            except ImportError:
                warn("tqdm not installed; progress bar disabled.")
                progress = None

        cfg = Config(
            input_file=input_file,
            output_file=Path(output_file),
            error_log=Path(error_log),
            tz=tz,
            pbar=progress,
        )
        return execute_config(cfg)
    except ConversionError as e:
        record_exception(e, error_log)
        raise
    finally:
        if progress is not None:
            progress.close()

