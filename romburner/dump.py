"""Text protocol emitted by the programmer, and its consumer side.

The stream is::

    Programming.......
    Finished
    00 01 02 ... 0f
    10 11 ...

Bytes are two lowercase hex digits; a byte at an address ending a 16-byte
line (``(address + 1) % 16 == 0``) is followed by a newline, every other
byte by a single space.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, TextIO

from .constants import (
    DUMP_BYTES_PER_LINE,
    STATUS_FINISHED,
    STATUS_HEADER,
    STATUS_PROGRESS,
)
from .errors import DumpFormatError

_HEX_BYTE = re.compile(r"[0-9a-f]{2}")


def byte_separator(address: int) -> str:
    return "\n" if (address + 1) % DUMP_BYTES_PER_LINE == 0 else " "


def format_dump(begin: int, data: Iterable[int]) -> str:
    """Dump text for ``data`` read starting at address ``begin``."""
    parts: List[str] = []
    for offset, value in enumerate(data):
        parts.append(f"{value & 0xFF:02x}{byte_separator(begin + offset)}")
    return "".join(parts)


class DumpWriter:
    """Byte sink writing the dump format to a text stream."""

    def __init__(self, out: TextIO) -> None:
        self.out = out
        self.count = 0

    def __call__(self, address: int, value: int) -> None:
        self.out.write(f"{value & 0xFF:02x}{byte_separator(address)}")
        self.count += 1


class StatusWriter:
    """Operator-facing progress marker preceding the dump."""

    def __init__(self, out: TextIO) -> None:
        self.out = out
        self.pages = 0

    def begin(self) -> None:
        self.out.write(STATUS_HEADER)

    def page(self) -> None:
        self.out.write(STATUS_PROGRESS)
        self.pages += 1

    def finish(self) -> None:
        self.out.write(STATUS_FINISHED)


@dataclass
class ParsedDump:
    pages: int = 0
    finished: bool = False
    data: bytearray = field(default_factory=bytearray)


def parse_dump(text: str) -> ParsedDump:
    """Split programmer output into the status marker and dumped bytes.

    Text without the ``Programming`` header is read as a bare dump.
    """
    result = ParsedDump()
    body = text
    if text.startswith(STATUS_HEADER):
        rest = text[len(STATUS_HEADER):]
        end = rest.find(STATUS_FINISHED)
        progress = rest if end < 0 else rest[:end]
        if progress.strip(STATUS_PROGRESS):
            raise DumpFormatError(f"Unexpected text in progress marker: {progress!r}")
        result.pages = len(progress)
        if end < 0:
            return result
        result.finished = True
        body = rest[end + len(STATUS_FINISHED):]

    for index, token in enumerate(body.split()):
        if not _HEX_BYTE.fullmatch(token):
            raise DumpFormatError(f"Bad dump token #{index}: {token!r}")
        result.data.append(int(token, 16))
    return result


@dataclass(frozen=True)
class DumpMismatch:
    address: int
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"0x{self.address:04X}: expected {self.expected:02x}, read {self.actual:02x}"


def compare_dump(
    expected: Sequence[int],
    data: Sequence[int],
    begin: int = 0,
    end: Optional[int] = None,
) -> List[DumpMismatch]:
    """Differences between a dump starting at ``begin`` and the expected image.

    ``expected`` is indexed by device address. Bytes past the end of the
    image, or missing from a short dump, are reported with -1 on the side
    that has no value. ``end`` defaults to the end of the image.
    """
    if end is None:
        end = len(expected)
    mismatches: List[DumpMismatch] = []
    for offset, actual in enumerate(data):
        address = begin + offset
        want = expected[address] if address < len(expected) else -1
        if want != actual:
            mismatches.append(DumpMismatch(address, want, actual))
    for address in range(begin + len(data), min(end, len(expected))):
        mismatches.append(DumpMismatch(address, expected[address], -1))
    return mismatches
