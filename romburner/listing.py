"""Human-readable listing of the control store, for bench debugging."""

from __future__ import annotations

from typing import List

from .encoding.isa import OPCODE_SLOTS, mnemonic
from .encoding.microcode import CONTROL_WORDS
from .encoding.signals import signal_names


def format_slot(slot: int) -> List[str]:
    """Lines for one slot: header, then ``step  word  signals``."""
    steps = CONTROL_WORDS[slot]
    lines = [f"@{slot:02o}  {mnemonic(slot):<14} ({len(steps)} steps)"]
    for step, word in enumerate(steps):
        names = " ".join(signal_names(word))
        lines.append(f"    {step}  {int(word):06x}  {names}")
    return lines


def format_listing() -> str:
    lines: List[str] = []
    for slot in range(OPCODE_SLOTS):
        lines.extend(format_slot(slot))
    return "\n".join(lines) + "\n"
