"""ROM variants: an encoder plus the geometry of the part it is burned into."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

from ..constants import (
    BLANK_PATTERN,
    CONTROL_DEVICE_SIZE,
    CONTROL_LOGICAL_SIZE,
    DISPLAY_DEVICE_SIZE,
    DISPLAY_LOGICAL_SIZE,
    NO_SIGNALS,
)
from .control_store import encode_control
from .display import encode_display

Encoder = Callable[[int], int]


@dataclass(frozen=True)
class RomVariant:
    """Descriptor for one kind of ROM image."""

    name: str
    encode: Encoder
    logical_size: int
    device_size: int
    fill: int
    description: str = ""

    def byte_at(self, address: int) -> int:
        """Expected device byte, including the fill beyond the logical table."""
        if address >= self.logical_size:
            return self.fill
        return self.encode(address) & 0xFF


DISPLAY = RomVariant(
    name="display",
    encode=encode_display,
    logical_size=DISPLAY_LOGICAL_SIZE,
    device_size=DISPLAY_DEVICE_SIZE,
    fill=BLANK_PATTERN,
    description="Four-digit octal / signed decimal seven-segment decoder",
)

CONTROL = RomVariant(
    name="control",
    encode=encode_control,
    logical_size=CONTROL_LOGICAL_SIZE,
    device_size=CONTROL_DEVICE_SIZE,
    fill=NO_SIGNALS,
    description="24-bit control store, one byte per bank",
)

VARIANTS: Dict[str, RomVariant] = {v.name: v for v in (DISPLAY, CONTROL)}


def get_variant(name: str) -> RomVariant:
    try:
        return VARIANTS[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown ROM variant '{name}' (expected one of: {sorted(VARIANTS)})"
        ) from None
