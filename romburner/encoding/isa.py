"""Instruction word format of the 12-bit accumulator CPU.

    11      8   7    6   5                0
  +-----------+--------+------------------+
  |   INSN    |  MODE  |     OPERAND      |
  +-----------+--------+------------------+

The upper six bits (INSN, MODE) select one of 64 control-store slots. The
assembler writes words in octal, so instruction bases below are octal too.
"""

from __future__ import annotations

import enum
from typing import Dict, NamedTuple, Union


class Instruction(enum.IntEnum):
    """Instructions by their 12-bit base word."""

    ADD = 0o0000
    SUB = 0o0400
    RSB = 0o1000
    SHL = 0o1400
    CMP = 0o2000
    LDA = 0o2400
    STA = 0o3000
    OUT = 0o3400
    JMP = 0o4000
    JPC = 0o4400
    JPN = 0o5000
    JMS = 0o5400
    NOP = 0o6000
    SWP = 0o6400
    ILL = 0o7000  # Reserved, executes as NOP
    HLT = 0o7400

    @property
    def index(self) -> int:
        return self.value >> 8

    @property
    def is_jump(self) -> bool:
        return self in JUMPS


JUMPS = frozenset({Instruction.JMP, Instruction.JPC, Instruction.JPN, Instruction.JMS})


class AddressingMode(enum.IntEnum):
    """Operand modes for data instructions."""

    CURRENT_PAGE = 0
    ZERO_PAGE = 1
    IMMEDIATE = 2
    INDIRECT = 3


class JumpMode(enum.IntEnum):
    """Target modes for jump instructions."""

    INDIRECT_CURRENT_PAGE = 0
    INDIRECT_ZERO_PAGE = 1
    DIRECT = 2
    ACCUMULATOR = 3


Mode = Union[AddressingMode, JumpMode]

OPCODE_SLOTS = 64
OPERAND_MASK = 0o77
WORD_MASK = 0o7777

_BY_INDEX = {insn.index: insn for insn in Instruction}


class Opcode(NamedTuple):
    instruction: Instruction
    mode: Mode

    @property
    def slot(self) -> int:
        return (self.instruction.index << 2) | int(self.mode)


def decode_opcode(slot: int) -> Opcode:
    """Instruction and addressing mode for control-store slot ``slot``."""
    slot &= OPCODE_SLOTS - 1
    insn = _BY_INDEX[slot >> 2]
    mode_bits = slot & 3
    mode: Mode = JumpMode(mode_bits) if insn.is_jump else AddressingMode(mode_bits)
    return Opcode(insn, mode)


def opcode_slot(word: int) -> int:
    """Control-store slot executed for a 12-bit instruction word."""
    return (word & WORD_MASK) >> 6


def encode_word(instruction: Instruction, mode: Mode, operand: int = 0) -> int:
    if not 0 <= operand <= OPERAND_MASK:
        raise ValueError(f"Operand @{operand:o} does not fit in six bits")
    return int(instruction) | (int(mode) << 6) | operand


# Operand syntax used by the assembler and its listings. The two mode enums
# compare equal by value, so each gets its own table.
_DATA_OPERANDS: Dict[AddressingMode, str] = {
    AddressingMode.CURRENT_PAGE: "@nnnn",
    AddressingMode.ZERO_PAGE: "@nn",
    AddressingMode.IMMEDIATE: "#nn",
    AddressingMode.INDIRECT: "[@nnnn]",
}

_JUMP_OPERANDS: Dict[JumpMode, str] = {
    JumpMode.INDIRECT_CURRENT_PAGE: "[@nnnn]",
    JumpMode.INDIRECT_ZERO_PAGE: "[@nn]",
    JumpMode.DIRECT: "@nnnn",
    JumpMode.ACCUMULATOR: "A+nn",
}


def operand_form(insn: Instruction, mode: Mode) -> str:
    if insn.is_jump:
        return _JUMP_OPERANDS[JumpMode(int(mode))]
    return _DATA_OPERANDS[AddressingMode(int(mode))]


def mnemonic(slot: int) -> str:
    """Assembler-style rendering of a slot, e.g. ``"JMP A+nn"``."""
    insn, mode = decode_opcode(slot)
    return f"{insn.name} {operand_form(insn, mode)}"
