"""Address-to-byte encoder for the control-store ROMs.

    12     9   8    6   5          0
  +---------+--------+-------------+
  |  BANK   |  STEP  |   OPCODE    |
  +---------+--------+-------------+

The same image is burned into three chips; each chip has its BANK lines
strapped to a different value so it delivers one byte of the 24-bit word.
"""

from __future__ import annotations

from typing import NamedTuple

from ..constants import CONTROL_LOGICAL_SIZE, NO_SIGNALS
from .microcode import control_word
from .signals import bank_byte


class ControlAddress(NamedTuple):
    bank: int
    step: int
    opcode: int


def split_control_address(address: int) -> ControlAddress:
    return ControlAddress(
        bank=address >> 9,
        step=(address >> 6) & 7,
        opcode=address & 63,
    )


def control_address(opcode: int, step: int, bank: int) -> int:
    return (bank << 9) | ((step & 7) << 6) | (opcode & 63)


def encode_control(address: int) -> int:
    """Return the control byte stored at ``address``.

    Total over all non-negative addresses; anything outside the 2K table
    asserts no signals.
    """
    if address >= CONTROL_LOGICAL_SIZE:
        return NO_SIGNALS

    bank, step, opcode = split_control_address(address)
    return bank_byte(control_word(opcode, step), bank)


__all__ = [
    "ControlAddress",
    "control_address",
    "encode_control",
    "split_control_address",
]
