"""Address-to-pattern encoder for the four-digit display ROM.

Address layout (15 bits):

     14    13 12   11 ..................... 0
  +------+-------+---------------------------+
  | MODE | SLOT  |          VALUE            |
  +------+-------+---------------------------+

MODE 0 shows VALUE as four octal digits. MODE 1 reads VALUE as a 12-bit
two's-complement number and shows it in decimal with leading zeros
suppressed; a negative number lights the decimal point of the rightmost
digit. SLOT selects which digit the display multiplexer is currently
driving, 0 being the least significant.
"""

from __future__ import annotations

from typing import NamedTuple

from ..constants import DISPLAY_LOGICAL_SIZE
from .segments import BLANK, DIGIT_PATTERNS, SIGN_MARK

DECIMAL_MODE = 0o40000
VALUE_MASK = 0o7777
VALUE_SIGN = 0o4000
VALUE_RANGE = 0o10000
DIGIT_SLOTS = 4


class DisplayAddress(NamedTuple):
    decimal: bool
    slot: int
    value: int


def split_display_address(address: int) -> DisplayAddress:
    return DisplayAddress(
        decimal=bool(address & DECIMAL_MODE),
        slot=(address >> 12) & 3,
        value=address & VALUE_MASK,
    )


def display_address(value: int, slot: int, *, decimal: bool = False) -> int:
    """Build the ROM address showing ``value`` at digit ``slot``.

    ``value`` may be negative in decimal mode; it is stored as 12-bit two's
    complement.
    """
    if not 0 <= slot < DIGIT_SLOTS:
        raise ValueError(f"Digit slot out of range: {slot}")
    address = (slot << 12) | (value & VALUE_MASK)
    if decimal:
        address |= DECIMAL_MODE
    return address


def to_signed(value: int) -> int:
    """Interpret a 12-bit field as two's complement."""
    value &= VALUE_MASK
    return value - VALUE_RANGE if value & VALUE_SIGN else value


def _octal_digit(value: int, slot: int) -> int:
    return DIGIT_PATTERNS[(value >> (3 * slot)) & 7]


def _decimal_digit(value: int, slot: int) -> int:
    signed = to_signed(value)
    negative = signed < 0
    magnitude = -signed if negative else signed

    if slot == 0:
        pattern = DIGIT_PATTERNS[magnitude % 10]
        return pattern ^ SIGN_MARK if negative else pattern

    place = 10**slot
    if magnitude < place:
        return BLANK
    return DIGIT_PATTERNS[(magnitude // place) % 10]


def encode_display(address: int) -> int:
    """Return the segment byte stored at ``address``.

    Total over all non-negative addresses; anything above the 15-bit table
    reads as blank.
    """
    if address >= DISPLAY_LOGICAL_SIZE:
        return BLANK

    decimal, slot, value = split_display_address(address)
    if decimal:
        return _decimal_digit(value, slot)
    return _octal_digit(value, slot)


def render(value: int, *, decimal: bool = False) -> list[int]:
    """Patterns for all four slots, most significant first."""
    return [
        encode_display(display_address(value, slot, decimal=decimal))
        for slot in reversed(range(DIGIT_SLOTS))
    ]


__all__ = [
    "DECIMAL_MODE",
    "DIGIT_SLOTS",
    "DisplayAddress",
    "display_address",
    "encode_display",
    "render",
    "split_display_address",
    "to_signed",
]
