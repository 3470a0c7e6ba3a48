"""Shared pytest fixtures for the ROM programmer tests."""

from __future__ import annotations

import io

import pytest

from romburner.config import ProgrammerConfig
from romburner.hardware.bus import BusTiming, MemoryBus, PinBus
from romburner.hardware.simulated import SimulatedPins, simulated_board


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def board() -> SimulatedPins:
    """Programmer board with a small blank EEPROM in the socket."""
    return simulated_board(0x100)


@pytest.fixture
def pin_bus(board: SimulatedPins) -> PinBus:
    return PinBus(board, board.pin_map, BusTiming())


@pytest.fixture
def memory_bus() -> MemoryBus:
    return MemoryBus(0x100)


@pytest.fixture
def control_config() -> ProgrammerConfig:
    return ProgrammerConfig.for_variant("control")
