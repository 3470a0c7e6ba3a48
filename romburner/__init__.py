"""ROM image synthesis and EEPROM programming for a 12-bit accumulator CPU."""

__version__ = "1.0.0"

from .config import PinMap, ProgrammerConfig
from .dump import DumpMismatch, ParsedDump, compare_dump, format_dump, parse_dump
from .encoding import (
    CONTROL,
    DISPLAY,
    VARIANTS,
    RomVariant,
    encode_control,
    encode_display,
    get_variant,
)
from .errors import ConfigError, DumpFormatError, ProgrammerStateError, RomBurnerError
from .image import build_image, export_image
from .programmer import Programmer, ProgrammerState

__all__ = [
    "CONTROL",
    "DISPLAY",
    "VARIANTS",
    "ConfigError",
    "DumpFormatError",
    "DumpMismatch",
    "ParsedDump",
    "PinMap",
    "Programmer",
    "ProgrammerConfig",
    "ProgrammerState",
    "ProgrammerStateError",
    "RomBurnerError",
    "RomVariant",
    "build_image",
    "compare_dump",
    "encode_control",
    "encode_display",
    "export_image",
    "format_dump",
    "get_variant",
    "parse_dump",
]
