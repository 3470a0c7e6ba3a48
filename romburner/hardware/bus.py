"""Byte-level access to the ROM socket.

``DeviceBus`` is the narrow interface the sequencer drives. ``PinBus``
implements it by bit-banging the programmer board; ``MemoryBus`` is an
in-memory stand-in for tests and dry runs.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Deque, Literal, Optional, Tuple

from ..config import PinMap, ProgrammerConfig
from ..constants import ADDRESS_BITS, ADDRESS_MASK
from .pins import HIGH, LOW, PinInterface, PinMode

logger = logging.getLogger(__name__)


class BusDirection(enum.Enum):
    """Direction of the data lines as seen from the programmer."""

    OUTPUT = "output"  # programmer drives, device write-enabled
    INPUT = "input"  # device drives, output-enable asserted


class DeviceBus(ABC):
    """Address/data access to one byte-wide device."""

    direction: Optional[BusDirection] = None

    @abstractmethod
    def set_direction(self, direction: BusDirection) -> None:
        pass

    @abstractmethod
    def present_address(self, address: int) -> None:
        """Latch ``address`` into the device's address lines.

        Returns once the address lines have settled.
        """
        pass

    @abstractmethod
    def write_byte(self, value: int) -> None:
        """Store ``value`` at the presented address.

        Returns once write-enable is back high; the device may still be
        busy with its internal write cycle.
        """
        pass

    @abstractmethod
    def read_byte(self) -> int:
        """Read the byte at the presented address after the read settle time."""
        pass


@dataclass
class BusTiming:
    address_settle_us: float = 1.0
    write_settle_ms: float = 5.0
    write_pulse_us: float = 1.0
    read_settle_us: float = 1.0

    @classmethod
    def from_config(cls, config: ProgrammerConfig) -> "BusTiming":
        return cls(
            address_settle_us=config.address_settle_us,
            write_settle_ms=config.write_settle_ms,
            write_pulse_us=config.write_pulse_us,
            read_settle_us=config.read_settle_us,
        )


class PinBus(DeviceBus):
    """Programmer board: 2-wire address shift register, 8 data lines, WE, OE.

    The shift register has no latch and no acknowledgement: each rising
    clock edge shifts ``SHIFT_DATA`` in, and the address is valid after the
    sixteenth edge.
    """

    def __init__(
        self,
        pins: PinInterface,
        pin_map: Optional[PinMap] = None,
        timing: Optional[BusTiming] = None,
    ) -> None:
        self.pins = pins
        self.pin_map = pin_map or PinMap()
        self.timing = timing or BusTiming()
        self.direction = None
        self._setup()

    def _setup(self) -> None:
        pm = self.pin_map
        for pin in (pm.shift_data, pm.shift_clock, pm.write_enable, pm.output_enable):
            self.pins.configure(pin, PinMode.OUTPUT)
        # WE and OE are active low; park both deasserted.
        self.pins.write(pm.write_enable, HIGH)
        self.pins.write(pm.output_enable, HIGH)
        self.pins.write(pm.shift_clock, LOW)
        self.pins.write(pm.shift_data, LOW)

    def set_direction(self, direction: BusDirection) -> None:
        pm = self.pin_map
        if direction is BusDirection.OUTPUT:
            # Release the device's outputs before driving the lines.
            self.pins.write(pm.output_enable, HIGH)
            for pin in pm.data:
                self.pins.configure(pin, PinMode.OUTPUT)
        else:
            for pin in pm.data:
                self.pins.configure(pin, PinMode.INPUT)
            self.pins.write(pm.output_enable, LOW)
        self.direction = direction
        logger.debug("Data bus direction: %s", direction.value)

    def present_address(self, address: int) -> None:
        pm = self.pin_map
        address &= ADDRESS_MASK
        for bit in reversed(range(ADDRESS_BITS)):
            self.pins.write(pm.shift_data, bool((address >> bit) & 1))
            self.pins.write(pm.shift_clock, HIGH)
            self.pins.write(pm.shift_clock, LOW)
        self.pins.delay_us(self.timing.address_settle_us)

    def write_byte(self, value: int) -> None:
        if self.direction is not BusDirection.OUTPUT:
            raise ValueError("Data bus is not configured for output")
        pm = self.pin_map
        for n, pin in enumerate(pm.data):
            self.pins.write(pin, bool((value >> n) & 1))
        # Covers both data setup and the previous byte's write cycle.
        self.pins.delay_ms(self.timing.write_settle_ms)
        self.pins.write(pm.write_enable, LOW)
        self.pins.delay_us(self.timing.write_pulse_us)
        self.pins.write(pm.write_enable, HIGH)

    def read_byte(self) -> int:
        if self.direction is not BusDirection.INPUT:
            raise ValueError("Data bus is not configured for input")
        self.pins.delay_us(self.timing.read_settle_us)
        value = 0
        for n, pin in enumerate(self.pin_map.data):
            if self.pins.read(pin):
                value |= 1 << n
        return value


@dataclass
class BusAccessLog:
    kind: Literal["read", "write"]
    address: int
    value: int


class MemoryBus(DeviceBus):
    """Byte array standing in for the device."""

    def __init__(self, size: int, *, fill: int = 0xFF, log_limit: int = 256) -> None:
        self.data = bytearray([fill & 0xFF]) * size
        self.address = 0
        self.direction = None
        self._log: Deque[BusAccessLog] = deque(maxlen=log_limit)

    def set_direction(self, direction: BusDirection) -> None:
        self.direction = direction

    def present_address(self, address: int) -> None:
        # Address lines above the part's size are not connected.
        self.address = address & (len(self.data) - 1)

    def write_byte(self, value: int) -> None:
        if self.direction is not BusDirection.OUTPUT:
            raise ValueError("Data bus is not configured for output")
        value &= 0xFF
        self.data[self.address] = value
        self._log.append(BusAccessLog("write", self.address, value))

    def read_byte(self) -> int:
        if self.direction is not BusDirection.INPUT:
            raise ValueError("Data bus is not configured for input")
        value = self.data[self.address]
        self._log.append(BusAccessLog("read", self.address, value))
        return value

    def access_log(self) -> Tuple[BusAccessLog, ...]:
        return tuple(self._log)


__all__ = [
    "BusAccessLog",
    "BusDirection",
    "BusTiming",
    "DeviceBus",
    "MemoryBus",
    "PinBus",
]
