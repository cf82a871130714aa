"""Shared constants, enums, and dataclasses used across aqi2frame."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

import numpy as np

# Frame markers
START_BYTE = 0x7A
END_BYTE = 0x7F

# Wire field widths in bytes
ID_NBYTES = 1
TIME_NBYTES = 4
VALUE_NBYTES = 4
AQI_NBYTES = 2
CHECKSUM_NBYTES = 1
LENGTH_NBYTES = 1
MARKER_NBYTES = 1

# size of the whole frame, markers included. Written into the LENGTH byte.
PACKET_LENGTH = (
    AQI_NBYTES + CHECKSUM_NBYTES + ID_NBYTES + LENGTH_NBYTES
    + TIME_NBYTES + VALUE_NBYTES + 2*MARKER_NBYTES
)

# one-byte zero vector emitted in place of a frame for a rejected record
SENTINEL = b"\x00"

TIME_FORMAT = "YYYY:MM:DD HH:MM:SS"
DEFAULT_ERROR_LOG = "aqi2frame.log"

# accepted header rows for the input csv
SUMMARY_HEADERS = (
    ("id", "time", "value", "aqi", "pollution"),
    ("id", "time", "value", "aqi"),
)


class FieldKind(Enum):
    LENGTH = auto()
    ID = auto()
    TIME = auto()
    VALUE = auto()
    AQI = auto()


# host-native dtypes for each wire field. "=" means native byte order; the
# encoder normalizes to big-endian after reading the native memory layout.
FIELD_DTYPES = {
    FieldKind.LENGTH: np.dtype("=u1"),
    FieldKind.ID: np.dtype("=u1"),
    FieldKind.TIME: np.dtype("=i4"),
    FieldKind.VALUE: np.dtype("=f4"),
    FieldKind.AQI: np.dtype("=i2"),
}
FIELD_NBYTES = {
    FieldKind.LENGTH: LENGTH_NBYTES,
    FieldKind.ID: ID_NBYTES,
    FieldKind.TIME: TIME_NBYTES,
    FieldKind.VALUE: VALUE_NBYTES,
    FieldKind.AQI: AQI_NBYTES,
}

for _kind, _dtype in FIELD_DTYPES.items():
    assert _dtype.itemsize == FIELD_NBYTES[_kind], f"dtype width mismatch for {_kind.name}"
assert PACKET_LENGTH == 15


class RejectReason(Enum):
    MISSING_FIELD = auto()
    INVALID_TIMESTAMP = auto()
    INVALID_ID = auto()
    INVALID_NUMBER = auto()


@dataclass(frozen=True, slots=True)
class SummaryRecord:
    id: int
    time: str
    value: float
    aqi: int


@dataclass(frozen=True, slots=True)
class ParsedTimestamp:
    valid: bool
    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    epoch: int | None = None  # seconds since the unix epoch, wrapped to int32


@dataclass(frozen=True, slots=True)
class EncodedFrame:
    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    @property
    def checksum(self) -> int:
        return self.data[-2]


@dataclass(frozen=True, slots=True)
class Rejection:
    reason: RejectReason
    line_pos: int | None = None

    @property
    def data(self) -> bytes:
        return SENTINEL

    def __len__(self) -> int:
        return len(SENTINEL)

    def __bytes__(self) -> bytes:
        return SENTINEL


@dataclass(frozen=True, slots=True)
class ConversionResult:
    completed: bool
    frames_written: int
    failed_line: int | None = None
    reason: RejectReason | None = None


@dataclass
class Config:
    """Config flags"""
    input_file: Path = Path("dust_aqi.csv")       # summary csv produced by the aggregation step
    output_file: Path = Path("dust_packets.txt")  # one hex-encoded frame per line
    error_log: Path = Path(DEFAULT_ERROR_LOG)     # timestamped error entries are appended here
    tz: str | None = None                         # IANA zone for epoch conversion (None = host local time)
    pbar: object | None = None                    # tqdm progress bar, if requested


__all__ = [
    "START_BYTE",
    "END_BYTE",
    "ID_NBYTES",
    "TIME_NBYTES",
    "VALUE_NBYTES",
    "AQI_NBYTES",
    "CHECKSUM_NBYTES",
    "LENGTH_NBYTES",
    "MARKER_NBYTES",
    "PACKET_LENGTH",
    "SENTINEL",
    "TIME_FORMAT",
    "DEFAULT_ERROR_LOG",
    "SUMMARY_HEADERS",
    "FieldKind",
    "FIELD_DTYPES",
    "FIELD_NBYTES",
    "RejectReason",
    "SummaryRecord",
    "ParsedTimestamp",
    "EncodedFrame",
    "Rejection",
    "ConversionResult",
    "Config",
]
