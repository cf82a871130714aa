"""Public package exports for aqi2frame."""

from .aqi2frame import aqi2frame
from .encode import compute_checksum, encode_field, host_is_little_endian
from .formats import ConversionResult, EncodedFrame, Rejection, RejectReason
from .output import format_hex
from .packet import assemble_frame, assemble_record
from .timestamps import parse_timestamp
from .warninghandler import ConversionWarning

__all__ = [
    "aqi2frame",
    "assemble_frame",
    "assemble_record",
    "compute_checksum",
    "encode_field",
    "format_hex",
    "host_is_little_endian",
    "parse_timestamp",
    "ConversionResult",
    "ConversionWarning",
    "EncodedFrame",
    "Rejection",
    "RejectReason",
]

__version__ = "1.0.0"
