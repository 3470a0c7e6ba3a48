from __future__ import annotations

import io

import pytest

from romburner.dump import (
    DumpMismatch,
    DumpWriter,
    StatusWriter,
    byte_separator,
    compare_dump,
    format_dump,
    parse_dump,
)
from romburner.errors import DumpFormatError


def test_separator_breaks_after_sixteenth_byte() -> None:
    assert byte_separator(0) == " "
    assert byte_separator(14) == " "
    assert byte_separator(15) == "\n"
    assert byte_separator(31) == "\n"


def test_format_dump_is_lowercase_hex() -> None:
    text = format_dump(0, range(0xF0, 0x100))
    assert text == " ".join(f"{b:02x}" for b in range(0xF0, 0x100)) + "\n"
    assert "F" not in text


def test_format_dump_line_breaks_follow_address() -> None:
    # Starting mid-line, the first break comes after address 0x0F.
    assert format_dump(14, [1, 2, 3]) == "01 02\n03 "


def test_dump_writer_matches_format_dump() -> None:
    out = io.StringIO()
    writer = DumpWriter(out)
    for address, value in enumerate([0xAB, 0x01, 0xFF]):
        writer(address, value)
    assert out.getvalue() == format_dump(0, [0xAB, 0x01, 0xFF])
    assert writer.count == 3


def test_status_writer() -> None:
    out = io.StringIO()
    status = StatusWriter(out)
    status.begin()
    status.page()
    status.page()
    status.finish()
    assert out.getvalue() == "Programming..\nFinished\n"
    assert status.pages == 2


def test_parse_full_output() -> None:
    text = "Programming...\nFinished\n" + format_dump(0, range(32))
    parsed = parse_dump(text)
    assert parsed.pages == 3
    assert parsed.finished
    assert parsed.data == bytearray(range(32))


def test_parse_bare_dump() -> None:
    parsed = parse_dump("00 11\n22")
    assert not parsed.finished
    assert parsed.data == bytearray([0x00, 0x11, 0x22])


def test_parse_unfinished_run() -> None:
    parsed = parse_dump("Programming....")
    assert parsed.pages == 4
    assert not parsed.finished
    assert parsed.data == bytearray()


@pytest.mark.parametrize(
    "text",
    [
        "Programming..x\nFinished\n00",
        "Programming\nFinished\n0g",
        "Programming\nFinished\nAB",
        "123",
    ],
)
def test_parse_rejects_malformed_text(text: str) -> None:
    with pytest.raises(DumpFormatError):
        parse_dump(text)


def test_compare_dump_reports_differences() -> None:
    expected = bytes([1, 2, 3, 4])
    assert compare_dump(expected, [1, 2, 3, 4]) == []
    assert compare_dump(expected, [1, 9, 3, 4]) == [DumpMismatch(1, 2, 9)]
    assert compare_dump(expected, [3, 4], begin=2) == []


def test_compare_dump_short_and_long_dumps() -> None:
    expected = bytes([1, 2, 3])
    assert compare_dump(expected, [1]) == [
        DumpMismatch(1, 2, -1),
        DumpMismatch(2, 3, -1),
    ]
    assert compare_dump(expected, [1], end=1) == []
    assert compare_dump(expected, [1, 2, 3, 7]) == [DumpMismatch(3, -1, 7)]


def test_mismatch_text() -> None:
    assert str(DumpMismatch(0x12, 0x03, 0xFF)) == "0x0012: expected 03, read ff"
