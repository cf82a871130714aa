from __future__ import annotations

from typing import TextIO

from .formats import EncodedFrame
from .logginghandler import get_global_log


def format_hex(data: bytes | bytearray | EncodedFrame) -> str:
    """Render bytes as upper-case two-digit hex, each byte followed by one space."""
    return "".join(f"{byte:02X} " for byte in bytes(data))


class FrameWriter:
    """Writes one hex line per frame to a text buffer, in the order given."""

    def __init__(self, output_buffer: TextIO, name: str | None = None):
        self.output_buffer = output_buffer
        self.name = name if name is not None else getattr(output_buffer, "name", "<buffer>")
        self.frames_written = 0

    def write(self, frame: EncodedFrame) -> str:
        line = format_hex(frame)
        self.output_buffer.write(line + "\n")
        self.frames_written += 1
        return line

    def finish(self) -> None:
        """Log a summary. The buffer itself belongs to the caller."""
        log = get_global_log()
        log(f"Wrote output file {self.name} with {self.frames_written} frames.")
