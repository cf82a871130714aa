from __future__ import annotations

from functools import lru_cache
from typing import Iterable

import numpy as np

from .formats import FIELD_DTYPES, FIELD_NBYTES, FieldKind

# 234.5 is 0x436A8000 as an IEEE754 single. Its lowest byte is 0x00 and its
# highest byte is 0x43, so the first byte in memory gives away the host order.
_PROBE_VALUE = 234.5


@lru_cache(maxsize=None)
def host_is_little_endian() -> bool:
    """Return True if the host stores the least significant byte first."""
    probe = np.array([_PROBE_VALUE], dtype="=f4").tobytes()
    return probe[0] == 0x00


def normalize_byte_order(native: bytes, little_endian: bool) -> bytes:
    """Reorder host-native bytes so the most significant byte comes first."""
    return native[::-1] if little_endian else native


def wrap_integer(value: int, nbytes: int, signed: bool) -> int:
    """Truncate an integer to ``nbytes`` the way a narrowing C cast would."""
    nbits = 8*nbytes
    value = int(value) & ((1 << nbits) - 1)
    if signed and value >= 1 << (nbits - 1):
        value -= 1 << nbits
    return value


def raw_bits(value, kind: FieldKind) -> int:
    """Return the unsigned bit pattern a field occupies on the wire."""
    nbytes = FIELD_NBYTES[kind]
    if FIELD_DTYPES[kind].kind == "f":
        return int(np.array([value], dtype="=f4").view("=u4")[0])
    return wrap_integer(value, nbytes, signed=False)


def encode_field(value, kind: FieldKind, little_endian: bool | None = None) -> bytes:
    """Encode one value as big-endian bytes of its fixed wire width.

    Integers are truncated to the field width (an id of 256 becomes 0x00, an
    AQI of 40000 becomes 0x9C40). Floats are rounded to single precision.

    Parameters
    ----------
    value : int | float
        The value to encode.
    kind : FieldKind
        Which frame field the value belongs to; selects width and type.
    little_endian : bool | None, optional
        Overrides the host probe. Default is None (probe the host).
    """
    if little_endian is None:
        little_endian = host_is_little_endian()
    nbytes = FIELD_NBYTES[kind]
    bits = raw_bits(value, kind)
    native = np.array(bits, dtype=f"=u{nbytes}").tobytes()
    return normalize_byte_order(native, little_endian)


def compute_checksum(data: Iterable[int] | bytes) -> int:
    """Negative-sum checksum: the byte that makes ``sum(data) + checksum`` a multiple of 256."""
    total = int(np.sum(np.frombuffer(bytes(data), dtype=np.uint8), dtype=np.uint64))
    return (0x100 - (total & 0xFF)) & 0xFF
