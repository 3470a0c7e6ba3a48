"""Shared device and protocol constants for the ROM programmer.

This module centralizes the sizes, default bytes, and timing values used
across the encoders, the bus drivers, and the tests.
"""

# Width of the address presented through the shift register. The two
# cascaded 8-bit registers always receive the full 16 bits, MSB first.
ADDRESS_BITS = 16
ADDRESS_MASK = (1 << ADDRESS_BITS) - 1

DATA_BITS = 8

# Seven-segment display ROM: 15 address lines (mode, slot, 12-bit value).
DISPLAY_LOGICAL_SIZE = 0x8000
DISPLAY_DEVICE_SIZE = 0x8000

# Control store: 3 banks of 512 bytes are populated inside a 2K logical
# table; the physical part has 13 address lines.
CONTROL_LOGICAL_SIZE = 2048
CONTROL_DEVICE_SIZE = 0x2000

# Fill bytes for addresses outside the logical table.
BLANK_PATTERN = 0xFF
NO_SIGNALS = 0x00

# Dump formatting.
DUMP_BYTES_PER_LINE = 16
STATUS_HEADER = "Programming"
STATUS_PROGRESS = "."
STATUS_FINISHED = "\nFinished\n"

# Default timings. The EEPROM's internal write cycle is a few milliseconds,
# so the write settle delay dominates a full sweep.
DEFAULT_ADDRESS_SETTLE_US = 1
DEFAULT_WRITE_SETTLE_MS = 5
DEFAULT_WRITE_PULSE_US = 1
DEFAULT_READ_SETTLE_US = 1
DEFAULT_PROGRESS_PAGE = 512
