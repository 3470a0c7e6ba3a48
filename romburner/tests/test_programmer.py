from __future__ import annotations

import io

import pytest

from romburner.config import ProgrammerConfig
from romburner.dump import compare_dump, parse_dump
from romburner.encoding.variants import CONTROL, DISPLAY
from romburner.errors import ConfigError, ProgrammerStateError
from romburner.hardware.bus import BusDirection, BusTiming, MemoryBus, PinBus
from romburner.hardware.simulated import simulated_board
from romburner.image import build_image
from romburner.programmer import Programmer, ProgrammerState


@pytest.mark.parametrize("variant", [DISPLAY, CONTROL], ids=lambda v: v.name)
def test_round_trip_has_no_differences(variant, out: io.StringIO) -> None:
    bus = MemoryBus(variant.device_size, fill=0xA5)
    programmer = Programmer(bus, variant, out)

    written = programmer.run()

    assert written == variant.device_size
    parsed = parse_dump(out.getvalue())
    assert parsed.finished
    assert parsed.pages == variant.device_size // 512
    assert compare_dump(build_image(variant), parsed.data) == []


def test_control_status_text(out: io.StringIO) -> None:
    bus = MemoryBus(CONTROL.device_size)
    Programmer(bus, CONTROL, out).program()
    assert out.getvalue() == "Programming" + "." * 16 + "\nFinished\n"


def test_control_fill_pass_clears_device(out: io.StringIO) -> None:
    bus = MemoryBus(CONTROL.device_size, fill=0xFF)
    Programmer(bus, CONTROL, out).program()
    assert bus.data[0] == 0x03
    assert bus.data[CONTROL.logical_size:] == bytes(
        CONTROL.device_size - CONTROL.logical_size
    )


def test_dump_text_layout(out: io.StringIO) -> None:
    config = ProgrammerConfig.for_variant("control", dump_end=0x20)
    bus = MemoryBus(CONTROL.device_size)
    programmer = Programmer(bus, CONTROL, out, config)
    programmer.program()
    out.seek(0)
    out.truncate()

    assert programmer.dump() == 0x20

    lines = out.getvalue().split("\n")
    assert lines[0] == " ".join(f"{b:02x}" for b in build_image(CONTROL)[:16])
    assert lines[0].startswith("03 ")
    assert len(lines) == 3 and lines[2] == ""


def test_state_machine_order(out: io.StringIO, memory_bus: MemoryBus) -> None:
    config = ProgrammerConfig(variant="display", device_size=0x100)
    programmer = Programmer(memory_bus, DISPLAY, out, config)
    assert programmer.state is ProgrammerState.IDLE

    with pytest.raises(ProgrammerStateError):
        programmer.dump()

    programmer.program()
    assert programmer.state is ProgrammerState.VERIFYING
    assert memory_bus.direction is BusDirection.INPUT

    with pytest.raises(ProgrammerStateError):
        programmer.program()


def test_simulated_board_round_trip(out: io.StringIO) -> None:
    config = ProgrammerConfig.for_variant("control", device_size=0x800)
    board = simulated_board(0x800, config.pins)
    bus = PinBus(board, config.pins, BusTiming.from_config(config))

    Programmer(bus, CONTROL, out, config).run()

    parsed = parse_dump(out.getvalue())
    assert len(parsed.data) == 0x800
    assert compare_dump(build_image(CONTROL, 0x800), parsed.data) == []
    assert board.device.stats.dropped_writes == 0
    assert board.device.stats.contention == 0


def test_short_write_settle_corrupts_only_the_dump(out: io.StringIO) -> None:
    config = ProgrammerConfig.for_variant(
        "display", device_size=0x100, write_settle_ms=0
    )
    board = simulated_board(0x100, config.pins)
    bus = PinBus(board, config.pins, BusTiming.from_config(config))

    programmer = Programmer(bus, DISPLAY, out, config)
    programmer.run()

    # The run itself completes normally.
    assert programmer.state is ProgrammerState.VERIFYING
    assert board.device.stats.dropped_writes == 0xFF
    parsed = parse_dump(out.getvalue())
    mismatches = compare_dump(build_image(DISPLAY, 0x100), parsed.data)
    assert len(mismatches) == 0xFF
    assert mismatches[0].address == 1
    assert mismatches[0].actual == 0xFF


def test_config_for_another_rom_is_rejected(out: io.StringIO) -> None:
    bus = MemoryBus(DISPLAY.device_size)
    with pytest.raises(ConfigError):
        Programmer(bus, DISPLAY, out, ProgrammerConfig())
    assert bus.access_log() == ()
    assert out.getvalue() == ""


def test_default_config_covers_whole_device(out: io.StringIO) -> None:
    bus = MemoryBus(DISPLAY.device_size)
    programmer = Programmer(bus, DISPLAY, out)
    assert programmer.device_size == DISPLAY.device_size
    assert programmer.program() == DISPLAY.device_size
    # Variant names in a config are case-insensitive.
    again = Programmer(bus, DISPLAY, out, ProgrammerConfig(variant="Display"))
    assert again.device_size == DISPLAY.device_size
