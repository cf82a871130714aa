from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Optional

from .aqi2frame import main as a2f_main, open_run_log
from .errorhandler import ConversionError, ErrorCode, check_log_access, record_error
from .formats import DEFAULT_ERROR_LOG
from .warninghandler import set_global_warn
from .logginghandler import set_global_log


class _LoggingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that records a bad command line in the error log before exiting."""

    def __init__(self, *args, error_log: str = DEFAULT_ERROR_LOG, **kwargs):
        super().__init__(*args, **kwargs)
        self.error_log = error_log

    def error(self, message: str):
        if check_log_access(self.error_log):
            record_error(ErrorCode.INVALID_COMMAND, self.error_log)
        super().error(message)


def _find_error_log(argv: Sequence[str]) -> str:
    # first pass so a bad command line is logged where the user asked
    pre = argparse.ArgumentParser(add_help=False, exit_on_error=False)
    pre.add_argument("-log", dest="error_log", default=DEFAULT_ERROR_LOG)
    try:
        known, _ = pre.parse_known_args(argv)
    except argparse.ArgumentError:
        return DEFAULT_ERROR_LOG
    return known.error_log


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]
    parser = _LoggingArgumentParser(
        prog="aqi2frame",
        description="CLI tool to encode air-quality summary csv files as hex telemetry frames",
        formatter_class=argparse.RawTextHelpFormatter,
        error_log=_find_error_log(argv),
    )
    parser.add_argument(
        "input_file",
        metavar="INPUT",
        help="Path to the summary csv file (id,time,value,aqi[,pollution]).",
    )
    parser.add_argument(
        "output_file",
        metavar="OUTPUT",
        help="Path to the output file. One line of hex bytes per frame.",
    )
    parser.add_argument("-log", dest="error_log", metavar="LOGFILE", default=DEFAULT_ERROR_LOG, help=f"File to append timestamped error entries to. Default is {DEFAULT_ERROR_LOG}.")
    parser.add_argument("-tz", dest="tz", metavar="ZONE", default=None, help="IANA timezone used to convert timestamps to epoch seconds (e.g. 'Asia/Ho_Chi_Minh').\n"\
        "Default is the host's local timezone.")
    parser.add_argument("-pbar", dest="pbar", action="store_true", help="Print a progress bar to stdout (requires tqdm).")
    parser.add_argument("-verbose", dest="verbose", type=int, choices=[0, 1, 2, 3], default=1, help="level of verbosity for warnings and informational messages. Default is 1.\n"\
        "0: no warnings or informational messages will be shown.\n"\
        "1: show warnings (default)\n"\
        "2: show all warnings and logs\n"\
        "3: write all warnings and logs (except pbar) to a file named .aqi2frame_*.log next to the output file.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    log_file_buffer = None
    try:
        if args.verbose == 3:
            log_file_buffer = open_run_log(args.output_file, args.error_log)
        set_global_warn(mode="cli", verbose=args.verbose, logfile_buffer=log_file_buffer)
        set_global_log(mode="cli", verbose=args.verbose, logfile_buffer=log_file_buffer)

        result = a2f_main(
            input_file=args.input_file,
            output_file=args.output_file,
            error_log=args.error_log,
            tz=args.tz,
            pbar=args.pbar,
        )
    except ConversionError as e:
        sys.stderr.write(f" *** {e}\n")
        sys.stderr.flush()
        return 1
    finally:
        if log_file_buffer is not None:
            log_file_buffer.close()

    if not result.completed:
        sys.stderr.write(f" *** Conversion stopped: data missing at line {result.failed_line}. See {args.error_log}.\n")
        sys.stderr.flush()
        return 1

    sys.stdout.write("Conversion completed successfully.\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
