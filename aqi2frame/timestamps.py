"""Parsing of ``YYYY:MM:DD HH:MM:SS`` timestamps into epoch seconds."""

from __future__ import annotations

import datetime
import re
import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import numpy as np

from .formats import ParsedTimestamp

# fixed positions: 4-digit year, everything else 2 digits, colons between the
# date parts and the time parts, a single space in the middle.
_TIMESTAMP_RE = re.compile(r"^([0-9]{4}):([0-9]{2}):([0-9]{2}) ([0-9]{2}):([0-9]{2}):([0-9]{2})$")


def resolve_timezone(tz: str | datetime.tzinfo | None) -> datetime.tzinfo | None:
    """Turn a zone name into a tzinfo. ``None`` keeps host local time.

    Raises
    ------
    ValueError
        If ``tz`` is not a known IANA zone name.
    """
    if tz is None or isinstance(tz, datetime.tzinfo):
        return tz
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {tz!r}.") from e


def _to_int32(epoch: int) -> int:
    # same wrap-around as a cast to a 32-bit signed integer
    return int(np.array(epoch, dtype=np.int64).astype(np.int32))


def to_epoch_seconds(
    year: int, month: int, day: int, hour: int, minute: int, second: int,
    tz: str | datetime.tzinfo | None = None,
) -> int:
    """Interpret the calendar fields as wall-clock time and return epoch seconds.

    With ``tz=None`` the host's local time rules apply (``time.mktime``), so the
    result depends on the machine's timezone and DST settings. Days past the
    end of a month roll over into the next month in both modes.
    """
    tzinfo = resolve_timezone(tz)
    if tzinfo is None:
        epoch = time.mktime((year, month, day, hour, minute, second, 0, 1, -1))
    else:
        wall = datetime.datetime(year, month, 1, hour, minute, second, tzinfo=tzinfo)
        wall += datetime.timedelta(days=day - 1)
        epoch = wall.timestamp()
    return _to_int32(int(epoch))


def parse_timestamp(text: str, tz: str | datetime.tzinfo | None = None) -> ParsedTimestamp:
    """Parse a ``YYYY:MM:DD HH:MM:SS`` string.

    Never raises on malformed input; check ``valid`` on the result instead.
    Day is only checked against 1..31, not against the length of the month.
    Year 0000 is invalid whichever zone is used.
    An unknown zone name in ``tz`` is a caller error and raises ValueError.

    Parameters
    ----------
    text : str
        Timestamp text.
    tz : str | tzinfo | None, optional
        Zone used to convert the wall-clock fields to epoch seconds. Default is
        None (host local time).

    Returns
    -------
    ParsedTimestamp
        ``valid`` plus the calendar fields and ``epoch`` when valid.
    """
    tzinfo = resolve_timezone(tz)
    match = _TIMESTAMP_RE.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        return ParsedTimestamp(valid=False)

    year, month, day, hour, minute, second = (int(g) for g in match.groups())
    if not (
        datetime.MINYEAR <= year
        and 1 <= month <= 12
        and 1 <= day <= 31
        and 0 <= hour <= 23
        and 0 <= minute <= 59
        and 0 <= second <= 59
    ):
        return ParsedTimestamp(valid=False)

    try:
        epoch = to_epoch_seconds(year, month, day, hour, minute, second, tzinfo)
    except (OverflowError, ValueError):
        # rollover past 9999:12:31 or outside the host mktime range
        return ParsedTimestamp(valid=False)

    return ParsedTimestamp(
        valid=True,
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        epoch=epoch,
    )


def check_date_format(text: str) -> bool:
    """True if ``text`` is a well-formed, in-range ``YYYY:MM:DD HH:MM:SS`` timestamp."""
    return parse_timestamp(text).valid
