"""Pure address-to-byte encoders and their static tables."""

from .control_store import control_address, encode_control, split_control_address
from .display import display_address, encode_display, split_display_address
from .microcode import CONTROL_WORDS, control_word
from .segments import BLANK, DIGIT_PATTERNS, SIGN_MARK, Segment
from .signals import Signal
from .variants import CONTROL, DISPLAY, VARIANTS, RomVariant, get_variant

__all__ = [
    "BLANK",
    "CONTROL",
    "CONTROL_WORDS",
    "DIGIT_PATTERNS",
    "DISPLAY",
    "SIGN_MARK",
    "VARIANTS",
    "RomVariant",
    "Segment",
    "Signal",
    "control_address",
    "control_word",
    "display_address",
    "encode_control",
    "encode_display",
    "get_variant",
    "split_control_address",
    "split_display_address",
]
