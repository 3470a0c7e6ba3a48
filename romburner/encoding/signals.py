"""Control signals of the hardwired control unit.

Each micro-step asserts a 24-bit word. The word is split over three
byte-wide ROM banks; bank ``n`` holds bits ``8n..8n+7`` and drives one
group of control lines:

  Bank 0 (bits 0-7): memory and instruction path
        7        6        5       4       3      2       1       0
    +--------+--------+-------+-------+------+-------+-------+-------+
    | RAM_IN |PAGE_OUT| IR_OUT| PC_INC| IR_IN|RAM_OUT| MAR_IN| PC_OUT|
    +--------+--------+-------+-------+------+-------+-------+-------+

  Bank 1 (bits 8-15): accumulator and ALU
    +--------+--------+-------+-------+------+-------+-------+-------+
    |FLAGS_IN| ALU_S2 | ALU_S1| ALU_S0|ALU_OUT| B_IN | A_OUT | A_IN  |
    +--------+--------+-------+-------+------+-------+-------+-------+

  Bank 2 (bits 16-23): sequencing and output
    +--------+--------+-------+-------+------+-------+-------+-------+
    |   -    |  END   | HALT  | OUT_IN|MAR_OUT|PC_IN_N|PC_IN_C| PC_IN |
    +--------+--------+-------+-------+------+-------+-------+-------+

Bit positions are the wiring between the ROM data pins and the control
lines; they are part of the image format.
"""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import List

WORD_BITS = 24
BANK_COUNT = 3
WORD_MASK = (1 << WORD_BITS) - 1


class Signal(IntFlag):
    """Control line bit masks."""

    # Bank 0
    PC_OUT = 1 << 0  # Program counter onto the bus
    MAR_IN = 1 << 1  # Memory address register load
    RAM_OUT = 1 << 2  # Memory read onto the bus
    IR_IN = 1 << 3  # Instruction register load
    PC_INC = 1 << 4  # Program counter increment
    IR_OUT = 1 << 5  # IR operand field (low 6 bits) onto the bus
    PAGE_OUT = 1 << 6  # PC page (high 6 bits) onto the bus
    RAM_IN = 1 << 7  # Memory write from the bus

    # Bank 1
    A_IN = 1 << 8  # Accumulator load
    A_OUT = 1 << 9  # Accumulator onto the bus
    B_IN = 1 << 10  # ALU operand register load
    ALU_OUT = 1 << 11  # ALU result onto the bus
    ALU_S0 = 1 << 12  # ALU function select
    ALU_S1 = 1 << 13
    ALU_S2 = 1 << 14
    FLAGS_IN = 1 << 15  # Latch carry/negative from the ALU

    # Bank 2
    PC_IN = 1 << 16  # Program counter load
    PC_IN_C = 1 << 17  # Program counter load when carry is set
    PC_IN_N = 1 << 18  # Program counter load when negative is set
    MAR_OUT = 1 << 19  # Memory address register onto the bus
    OUT_IN = 1 << 20  # Display register load
    HALT = 1 << 21  # Stop the clock
    END = 1 << 22  # Reset the micro-step counter, fetch next


class AluOp(IntEnum):
    """ALU functions as encoded on ALU_S2..ALU_S0."""

    ADD = 0  # A + B
    SUB = 1  # A - B
    RSB = 2  # B - A
    SHL = 3  # A << B
    PASS_B = 4  # B


def alu(op: AluOp) -> Signal:
    """Function-select lines for ``op``."""
    bits = Signal(0)
    if op & 1:
        bits |= Signal.ALU_S0
    if op & 2:
        bits |= Signal.ALU_S1
    if op & 4:
        bits |= Signal.ALU_S2
    return bits


def alu_op(word: int) -> AluOp:
    """Decode the ALU function selected by a control word."""
    value = 0
    if word & Signal.ALU_S0:
        value |= 1
    if word & Signal.ALU_S1:
        value |= 2
    if word & Signal.ALU_S2:
        value |= 4
    return AluOp(value)


def bank_byte(word: int, bank: int) -> int:
    """Byte of ``word`` stored in ROM bank ``bank``; unused banks read 0."""
    if not 0 <= bank < BANK_COUNT:
        return 0
    return (word >> (8 * bank)) & 0xFF


def signal_names(word: int) -> List[str]:
    """Names of the asserted signals, lowest bit first."""
    return [sig.name for sig in Signal if word & sig and sig.name]
