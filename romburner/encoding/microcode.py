"""Micro-step sequences for every control-store slot.

Every sequence starts with the two fetch steps, resolves the operand
address into MAR when the mode needs it, runs the instruction's execute
steps, and closes with a step asserting only ``END``. Sequences are at most
eight steps long because the step counter is three bits wide.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .isa import (
    OPCODE_SLOTS,
    AddressingMode,
    Instruction,
    JumpMode,
    Mode,
    decode_opcode,
)
from .signals import AluOp, Signal, alu

MAX_STEPS = 8
MIN_STEPS = 3

Sequence = Tuple[Signal, ...]

FETCH: Sequence = (
    Signal.PC_OUT | Signal.MAR_IN,
    Signal.RAM_OUT | Signal.IR_IN | Signal.PC_INC,
)

FINISH = Signal.END

# Operand address = PC page : IR operand.
_CURRENT_PAGE = Signal.PAGE_OUT | Signal.IR_OUT | Signal.MAR_IN
_ZERO_PAGE = Signal.IR_OUT | Signal.MAR_IN
_DEREF = Signal.RAM_OUT | Signal.MAR_IN

DATA_RESOLVE: Dict[AddressingMode, Sequence] = {
    AddressingMode.CURRENT_PAGE: (_CURRENT_PAGE,),
    AddressingMode.ZERO_PAGE: (_ZERO_PAGE,),
    AddressingMode.IMMEDIATE: (),
    AddressingMode.INDIRECT: (_CURRENT_PAGE, _DEREF),
}

JUMP_RESOLVE: Dict[JumpMode, Sequence] = {
    JumpMode.INDIRECT_CURRENT_PAGE: (_CURRENT_PAGE, _DEREF),
    JumpMode.INDIRECT_ZERO_PAGE: (_ZERO_PAGE, _DEREF),
    JumpMode.DIRECT: (_CURRENT_PAGE,),
    # Offset into B, A + B into MAR.
    JumpMode.ACCUMULATOR: (
        Signal.IR_OUT | Signal.B_IN,
        Signal.ALU_OUT | alu(AluOp.ADD) | Signal.MAR_IN,
    ),
}


def _arith(op: AluOp, *, store: bool = True) -> Signal:
    word = alu(op) | Signal.FLAGS_IN
    if store:
        word |= Signal.ALU_OUT | Signal.A_IN
    return word


def _execute(insn: Instruction, immediate: bool) -> Sequence:
    # Source of the operand value: memory at MAR, or the IR operand field.
    operand = Signal.IR_OUT if immediate else Signal.RAM_OUT

    if insn is Instruction.ADD:
        return (operand | Signal.B_IN, _arith(AluOp.ADD))
    if insn is Instruction.SUB:
        return (operand | Signal.B_IN, _arith(AluOp.SUB))
    if insn is Instruction.RSB:
        return (operand | Signal.B_IN, _arith(AluOp.RSB))
    if insn is Instruction.SHL:
        return (operand | Signal.B_IN, _arith(AluOp.SHL))
    if insn is Instruction.CMP:
        return (operand | Signal.B_IN, _arith(AluOp.SUB, store=False))
    if insn is Instruction.LDA:
        return (operand | Signal.A_IN,)
    if insn is Instruction.STA:
        if immediate:
            return ()
        return (Signal.A_OUT | Signal.RAM_IN,)
    if insn is Instruction.OUT:
        return (operand | Signal.OUT_IN,)
    if insn is Instruction.SWP:
        if immediate:
            return (
                Signal.IR_OUT | Signal.B_IN,
                Signal.ALU_OUT | alu(AluOp.PASS_B) | Signal.A_IN,
            )
        return (
            Signal.RAM_OUT | Signal.B_IN,
            Signal.A_OUT | Signal.RAM_IN,
            Signal.ALU_OUT | alu(AluOp.PASS_B) | Signal.A_IN,
        )
    if insn is Instruction.HLT:
        return (Signal.HALT,)
    # NOP and the reserved slot.
    return ()


def _execute_jump(insn: Instruction) -> Sequence:
    if insn is Instruction.JMP:
        return (Signal.MAR_OUT | Signal.PC_IN,)
    if insn is Instruction.JPC:
        return (Signal.MAR_OUT | Signal.PC_IN_C,)
    if insn is Instruction.JPN:
        return (Signal.MAR_OUT | Signal.PC_IN_N,)
    # JMS: return address into the target word, continue after it.
    return (
        Signal.PC_OUT | Signal.RAM_IN,
        Signal.MAR_OUT | Signal.PC_IN,
        Signal.PC_INC,
    )


def build_sequence(insn: Instruction, mode: Mode) -> Sequence:
    """Full micro-step sequence for one instruction/mode pair."""
    if insn.is_jump:
        body = JUMP_RESOLVE[JumpMode(mode)] + _execute_jump(insn)
    elif insn in (Instruction.NOP, Instruction.ILL, Instruction.HLT):
        # No operand: the mode bits are ignored.
        body = _execute(insn, immediate=True)
    else:
        mode = AddressingMode(mode)
        body = DATA_RESOLVE[mode] + _execute(insn, mode is AddressingMode.IMMEDIATE)
    return FETCH + body + (FINISH,)


def check_sequence(slot: int, steps: Sequence) -> Sequence:
    """Reject sequences the three-bit step counter cannot run."""
    if not MIN_STEPS <= len(steps) <= MAX_STEPS:
        raise ValueError(
            f"Slot @{slot:02o} has {len(steps)} steps (expected {MIN_STEPS}..{MAX_STEPS})"
        )
    return steps


def _build_table() -> Tuple[Sequence, ...]:
    table: List[Sequence] = []
    for slot in range(OPCODE_SLOTS):
        insn, mode = decode_opcode(slot)
        table.append(check_sequence(slot, build_sequence(insn, mode)))
    return tuple(table)


# CONTROL_WORDS[slot][step]; steps past the end of a sequence are absent.
CONTROL_WORDS: Tuple[Sequence, ...] = _build_table()


def control_word(slot: int, step: int) -> int:
    """Word asserted at ``step`` of ``slot``; 0 past the end of the sequence."""
    if not 0 <= slot < OPCODE_SLOTS:
        return 0
    steps = CONTROL_WORDS[slot]
    if not 0 <= step < len(steps):
        return 0
    return int(steps[step])


def sequence_length(slot: int) -> int:
    return len(CONTROL_WORDS[slot])


__all__ = [
    "CONTROL_WORDS",
    "FETCH",
    "FINISH",
    "MAX_STEPS",
    "MIN_STEPS",
    "build_sequence",
    "check_sequence",
    "control_word",
    "sequence_length",
]
