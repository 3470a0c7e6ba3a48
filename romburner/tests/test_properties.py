from __future__ import annotations

import io
import os

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from romburner.dump import compare_dump, format_dump, parse_dump
from romburner.encoding.control_store import control_address, encode_control
from romburner.encoding.display import DECIMAL_MODE, display_address, encode_display
from romburner.encoding.isa import OPCODE_SLOTS
from romburner.encoding.microcode import sequence_length
from romburner.encoding.segments import BLANK, DIGIT_PATTERNS, SIGN_MARK
from romburner.encoding.variants import CONTROL
from romburner.hardware.bus import MemoryBus
from romburner.image import build_image
from romburner.programmer import Programmer

FAST_MAX_EXAMPLES = int(os.getenv("ROMBURNER_PROP_EXAMPLES", "300"))

slots = st.integers(min_value=0, max_value=3)
values12 = st.integers(min_value=0, max_value=0o7777)


@given(slot=slots, value=values12, noise=values12)
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_octal_digit_depends_only_on_its_field(slot: int, value: int, noise: int) -> None:
    field = 0o7 << (3 * slot)
    other = (value & field) | (noise & ~field & 0o7777)
    assert encode_display(display_address(value, slot)) == encode_display(
        display_address(other, slot)
    )
    assert encode_display(display_address(value, slot)) == DIGIT_PATTERNS[
        (value >> (3 * slot)) & 7
    ]


@given(value=st.integers(min_value=-2048, max_value=2047), slot=slots)
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_decimal_never_shows_leading_zero(value: int, slot: int) -> None:
    pattern = encode_display(display_address(value, slot, decimal=True))
    magnitude = abs(value)
    if slot > 0 and magnitude < 10**slot:
        assert pattern == BLANK
    else:
        digit = (magnitude // 10**slot) % 10
        expected = DIGIT_PATTERNS[digit]
        if value < 0 and slot == 0:
            expected ^= SIGN_MARK
        assert pattern == expected


@given(value=st.integers(min_value=1, max_value=2047), slot=st.integers(1, 3))
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_negative_higher_slots_match_magnitude(value: int, slot: int) -> None:
    assert encode_display(display_address(-value, slot, decimal=True)) == (
        encode_display(display_address(value, slot, decimal=True))
    )


@given(address=st.integers(min_value=DECIMAL_MODE, max_value=0x7FFF))
@settings(max_examples=FAST_MAX_EXAMPLES, deadline=None)
def test_decimal_patterns_are_digits_or_blank(address: int) -> None:
    pattern = encode_display(address)
    assert pattern == BLANK or pattern in DIGIT_PATTERNS or (
        pattern ^ SIGN_MARK in DIGIT_PATTERNS
    )


@given(address=st.integers(min_value=0x8000, max_value=0xFFFF))
def test_display_beyond_table_is_blank(address: int) -> None:
    assert encode_display(address) == BLANK


@given(address=st.integers(min_value=2048, max_value=0xFFFF))
def test_control_beyond_table_is_zero(address: int) -> None:
    assert encode_control(address) == 0


@given(
    opcode=st.integers(min_value=0, max_value=OPCODE_SLOTS - 1),
    step=st.integers(min_value=0, max_value=7),
)
def test_control_past_sequence_is_zero(opcode: int, step: int) -> None:
    if step < sequence_length(opcode):
        return
    for bank in range(3):
        assert encode_control(control_address(opcode, step, bank)) == 0


@given(
    begin=st.integers(min_value=0, max_value=0x100),
    data=st.binary(max_size=80),
)
def test_dump_text_parses_back(begin: int, data: bytes) -> None:
    parsed = parse_dump(format_dump(begin, data))
    assert bytes(parsed.data) == data


@given(
    end=st.integers(min_value=0, max_value=CONTROL.device_size),
    fill=st.integers(min_value=0, max_value=0xFF),
)
@settings(
    max_examples=20,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
def test_dump_range_round_trip(end: int, fill: int) -> None:
    begin = end // 3
    bus = MemoryBus(CONTROL.device_size, fill=fill)
    out = io.StringIO()
    programmer = Programmer(bus, CONTROL, out)
    programmer.program()
    out.seek(0)
    out.truncate()

    assert programmer.dump(begin, end) == end - begin

    parsed = parse_dump(out.getvalue())
    assert compare_dump(build_image(CONTROL), parsed.data, begin, end) == []


@pytest.mark.nightly
@given(address=st.integers(min_value=0, max_value=0x7FFF))
@settings(max_examples=5000, deadline=None)
def test_display_address_fields_nightly(address: int) -> None:
    if not os.getenv("ROMBURNER_RUN_NIGHTLY"):
        pytest.skip("Nightly sweeps disabled (set ROMBURNER_RUN_NIGHTLY=1 to enable)")
    decimal = bool(address & DECIMAL_MODE)
    slot = (address >> 12) & 3
    value = address & 0o7777
    assert display_address(value, slot, decimal=decimal) == address
