"""Seven-segment patterns for the common-anode display ROM."""

from __future__ import annotations

from enum import IntFlag
from typing import Tuple

from ..constants import BLANK_PATTERN


class Segment(IntFlag):
    """Segment bit masks in data-line order.

    Bit layout follows the display's pin order with the common pins left out:

        7   6   5   4   3    2   1   0
      +---+---+---+---+----+---+---+---+
      | G | F | A | B | DP | C | D | E |
      +---+---+---+---+----+---+---+---+

    The positions are the board wiring and must not be reordered.
    """

    E = 0x01
    D = 0x02
    C = 0x04
    DP = 0x08
    B = 0x10
    A = 0x20
    F = 0x40
    G = 0x80


S = Segment

# Lit segments for each hex digit.
DIGIT_SEGMENTS: Tuple[Segment, ...] = (
    S.A | S.B | S.C | S.D | S.E | S.F,  # 0
    S.B | S.C,  # 1
    S.A | S.B | S.D | S.E | S.G,  # 2
    S.A | S.B | S.C | S.D | S.G,  # 3
    S.B | S.C | S.F | S.G,  # 4
    S.A | S.C | S.D | S.F | S.G,  # 5
    S.A | S.C | S.D | S.E | S.F | S.G,  # 6
    S.A | S.B | S.C,  # 7
    S.A | S.B | S.C | S.D | S.E | S.F | S.G,  # 8
    S.A | S.B | S.C | S.D | S.F | S.G,  # 9
    S.A | S.B | S.C | S.E | S.F | S.G,  # A
    S.C | S.D | S.E | S.F | S.G,  # b
    S.A | S.D | S.E | S.F,  # C
    S.B | S.C | S.D | S.E | S.G,  # d
    S.A | S.D | S.E | S.F | S.G,  # E
    S.A | S.E | S.F | S.G,  # F
)


def to_pattern(lit: Segment) -> int:
    """Return the common-anode byte for a set of lit segments."""
    return ~int(lit) & 0xFF


# Byte driven onto the display for each digit 0-15 (cleared bit = lit).
DIGIT_PATTERNS: Tuple[int, ...] = tuple(to_pattern(seg) for seg in DIGIT_SEGMENTS)

BLANK = BLANK_PATTERN

# XOR-ed into the least significant digit of a negative number; toggling the
# decimal point bit lights the point.
SIGN_MARK = int(Segment.DP)


def lit_segments(pattern: int) -> Segment:
    """Inverse of ``to_pattern``: the segments a byte lights."""
    return Segment(~pattern & 0xFF)


__all__ = [
    "Segment",
    "DIGIT_SEGMENTS",
    "DIGIT_PATTERNS",
    "BLANK",
    "SIGN_MARK",
    "to_pattern",
    "lit_segments",
]
