"""Numbered run-time errors and the timestamped error log.

Every entry appended to the error log looks like::

    [2024:05:01 10:00:00] Error 05: data missing at line 3

with the time taken from the local clock when the error is recorded.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path


ERROR_LOG_FORMAT = "[%(asctime)s] %(message)s"
ERROR_LOG_DATEFMT = "%Y:%m:%d %H:%M:%S"


class ErrorCode(Enum):
    INVALID_COMMAND = (1, "invalid command")
    INVALID_ARGUMENT = (2, "invalid argument")
    ACCESS_DENIED = (3, "{file_name} access denied")
    INVALID_CSV_FORMAT = (4, "invalid csv file format")
    DATA_MISSING = (5, "data missing at line {line_pos}")

    @property
    def number(self) -> int:
        return self.value[0]

    def format(self, **kwargs) -> str:
        return f"Error {self.number:02d}: " + self.value[1].format(**kwargs)


class ConversionError(Exception):
    """Base class for errors that abort a conversion and go to the error log."""
    code: ErrorCode = ErrorCode.INVALID_COMMAND

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.details = details

    @property
    def log_text(self) -> str:
        return self.code.format(**self.details)


class InvalidArgumentError(ConversionError, ValueError):
    code = ErrorCode.INVALID_ARGUMENT


class FileAccessError(ConversionError, OSError):
    code = ErrorCode.ACCESS_DENIED

    def __init__(self, message: str, file_name: str | Path):
        super().__init__(message, file_name=Path(file_name).name)


class CsvFormatError(ConversionError, ValueError):
    code = ErrorCode.INVALID_CSV_FORMAT


def check_log_access(log_file: str | Path) -> bool:
    """True if ``log_file`` can be opened for appending."""
    try:
        with open(log_file, "a"):
            pass
    except OSError:
        return False
    return True


def record_error(code: ErrorCode, log_file: str | Path, **kwargs) -> str:
    """Append a timestamped entry for ``code`` to ``log_file`` and return its text."""
    text = code.format(**kwargs)

    logger = logging.getLogger("aqi2frame.errors")
    logger.propagate = False
    logger.setLevel(logging.ERROR)
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(ERROR_LOG_FORMAT, datefmt=ERROR_LOG_DATEFMT))
    logger.addHandler(handler)
    try:
        logger.error(text)
    finally:
        logger.removeHandler(handler)
        handler.close()
    return text


def record_exception(exc: ConversionError, log_file: str | Path) -> str:
    """Append the log entry matching a ConversionError."""
    return record_error(exc.code, log_file, **exc.details)
