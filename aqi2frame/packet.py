"""Assembly of one summary record into a delimited, checksummed frame.

A record either becomes a 15 byte ``EncodedFrame``::

    [START][LENGTH][ID][TIME x4][VALUE x4][AQI x2][CHECKSUM][END]

or a ``Rejection`` naming why it could not be encoded. Nothing in here raises
on bad record data; the caller decides what a rejection means for the run.
"""

from __future__ import annotations

import datetime
import logging
import math
import re
from typing import Sequence

import numpy as np

from .encode import compute_checksum, encode_field
from .formats import (
    AQI_NBYTES,
    END_BYTE,
    ID_NBYTES,
    PACKET_LENGTH,
    START_BYTE,
    EncodedFrame,
    FieldKind,
    Rejection,
    RejectReason,
    SummaryRecord,
)
from .logginghandler import get_global_log
from .timestamps import parse_timestamp

N_RECORD_FIELDS = 4


# plain decimal notation only; int() and float() also accept "1_0"
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


def _parse_int(text: str) -> int | None:
    """Integer value of ``text``; decimal text is truncated toward zero."""
    text = text.strip()
    if _INT_RE.fullmatch(text):
        return int(text)
    number = _parse_float(text)
    if number is None or not math.isfinite(number):
        return None
    return int(number)


def _parse_float(text: str) -> float | None:
    text = text.strip()
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def _validate(
    fields: Sequence[str],
    tz: str | datetime.tzinfo | None,
    line_pos: int | None,
) -> tuple[SummaryRecord, int] | Rejection:
    fields = list(fields[:N_RECORD_FIELDS]) + [""]*(N_RECORD_FIELDS - len(fields))
    id_str, time_str, value_str, aqi_str = fields

    if any(len(f) == 0 for f in (id_str, time_str, value_str, aqi_str)):
        return Rejection(RejectReason.MISSING_FIELD, line_pos)

    timestamp = parse_timestamp(time_str, tz)
    if not timestamp.valid:
        return Rejection(RejectReason.INVALID_TIMESTAMP, line_pos)

    sensor_id = _parse_int(id_str)
    if sensor_id is None or sensor_id <= 0:
        return Rejection(RejectReason.INVALID_ID, line_pos)

    value = _parse_float(value_str)
    aqi = _parse_int(aqi_str)
    if value is None or aqi is None:
        return Rejection(RejectReason.INVALID_NUMBER, line_pos)

    return SummaryRecord(id=sensor_id, time=time_str, value=value, aqi=aqi), timestamp.epoch


def parse_record(
    fields: Sequence[str],
    tz: str | datetime.tzinfo | None = None,
    line_pos: int | None = None,
) -> SummaryRecord | Rejection:
    """Validate ``id,time,value,aqi`` text fields into a SummaryRecord.

    Missing trailing fields count as empty; fields after the fourth (the
    ``pollution`` column of the aggregator output) are ignored.
    """
    result = _validate(fields, tz, line_pos)
    if isinstance(result, Rejection):
        return result
    return result[0]


def _log_truncation(record: SummaryRecord, line_pos: int | None) -> None:
    log = get_global_log()
    where = f" at line {line_pos}" if line_pos is not None else ""
    if record.id >= 1 << (8*ID_NBYTES):
        log(f"Sensor id {record.id}{where} does not fit in {ID_NBYTES} byte and will be truncated.", logging.INFO)
    if not -(1 << (8*AQI_NBYTES - 1)) <= record.aqi < 1 << (8*AQI_NBYTES - 1):
        log(f"AQI {record.aqi}{where} does not fit in {AQI_NBYTES} bytes and will be truncated.", logging.INFO)


def build_frame(record: SummaryRecord, epoch: int, little_endian: bool | None = None) -> EncodedFrame:
    """Lay out an already validated record as a delimited frame."""
    payload = b"".join((
        encode_field(PACKET_LENGTH, FieldKind.LENGTH, little_endian),
        encode_field(record.id, FieldKind.ID, little_endian),
        encode_field(epoch, FieldKind.TIME, little_endian),
        encode_field(record.value, FieldKind.VALUE, little_endian),
        encode_field(record.aqi, FieldKind.AQI, little_endian),
    ))

    frame = np.zeros(PACKET_LENGTH, dtype=np.uint8)
    frame[0] = START_BYTE
    frame[1:1 + len(payload)] = np.frombuffer(payload, dtype=np.uint8)
    frame[-2] = compute_checksum(payload)
    frame[-1] = END_BYTE
    return EncodedFrame(frame.tobytes())


def assemble_record(
    id_str: str,
    time_str: str,
    value_str: str,
    aqi_str: str,
    tz: str | datetime.tzinfo | None = None,
    line_pos: int | None = None,
    little_endian: bool | None = None,
) -> EncodedFrame | Rejection:
    """Encode one record's text fields, or reject the record.

    Parameters
    ----------
    id_str, time_str, value_str, aqi_str : str
        Raw text of the four record fields.
    tz : str | tzinfo | None, optional
        Zone used for the timestamp conversion. Default is None (host local time).
    line_pos : int | None, optional
        Data line position, carried into a Rejection for error reporting.
    little_endian : bool | None, optional
        Overrides the host byte order probe. Default is None (probe the host).

    Returns
    -------
    EncodedFrame | Rejection
    """
    return assemble_fields((id_str, time_str, value_str, aqi_str), tz, line_pos, little_endian)


def assemble_fields(
    fields: Sequence[str],
    tz: str | datetime.tzinfo | None = None,
    line_pos: int | None = None,
    little_endian: bool | None = None,
) -> EncodedFrame | Rejection:
    """Like ``assemble_record`` but takes the split fields of one csv row."""
    result = _validate(fields, tz, line_pos)
    if isinstance(result, Rejection):
        return result
    record, epoch = result
    _log_truncation(record, line_pos)
    return build_frame(record, epoch, little_endian)


def assemble_frame(
    line: str,
    tz: str | datetime.tzinfo | None = None,
    line_pos: int | None = None,
    little_endian: bool | None = None,
) -> EncodedFrame | Rejection:
    """Like ``assemble_record`` but takes one raw comma-separated data line."""
    return assemble_fields(line.rstrip("\r\n").split(","), tz, line_pos, little_endian)
