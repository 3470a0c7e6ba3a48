"""Pin-level model of the programmer board and an EEPROM in its socket.

``SimulatedPins`` keeps pin modes and levels and a virtual clock that only
advances through ``delay_us``. ``SimulatedEeprom`` listens to pin edges the
way the board's parts do:

* the 2-wire shift register clocks ``SHIFT_DATA`` in on each rising edge of
  ``SHIFT_CLOCK``, MSB first, and feeds its outputs straight to the address
  pins;
* ``WE`` low latches the address, ``WE`` rising latches the data lines and
  starts the internal write cycle. A pulse arriving while a write cycle is
  still running is ignored, as on the real part, which is how too short a
  settle delay shows up: only in the verification dump;
* with ``OE`` low and ``WE`` high the device drives the data lines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import PinMap
from ..constants import ADDRESS_MASK
from .pins import HIGH, LOW, PinInterface, PinMode

logger = logging.getLogger(__name__)

# Write cycle time of a typical 28C-series part.
DEFAULT_WRITE_CYCLE_US = 1000.0


@dataclass
class EepromStats:
    writes: int = 0
    dropped_writes: int = 0
    contention: int = 0
    dropped_addresses: List[int] = field(default_factory=list)


class SimulatedEeprom:
    """Byte-wide EEPROM behind a 16-bit serial-in address register."""

    def __init__(
        self,
        size: int,
        *,
        write_cycle_us: float = DEFAULT_WRITE_CYCLE_US,
        fill: int = 0xFF,
    ) -> None:
        if size <= 0 or size & (size - 1):
            raise ValueError(f"Device size must be a power of two, got {size}")
        self.size = size
        self.memory = bytearray([fill & 0xFF]) * size
        self.write_cycle_us = write_cycle_us
        self.shift_register = 0
        self.stats = EepromStats()
        self._latched_address = 0
        self._busy_until = 0.0
        self._pins: Optional["SimulatedPins"] = None

    def attach(self, pins: "SimulatedPins") -> None:
        self._pins = pins

    @property
    def address(self) -> int:
        # Shift register outputs beyond the part's address pins float.
        return self.shift_register & (self.size - 1)

    def driving(self) -> bool:
        pins = self._require_pins()
        pm = pins.pin_map
        return pins.level(pm.output_enable) == LOW and pins.level(pm.write_enable) == HIGH

    def _require_pins(self) -> "SimulatedPins":
        if self._pins is None:
            raise RuntimeError("EEPROM is not attached to a pin model")
        return self._pins

    def on_edge(self, pin: int, level: bool, now_us: float) -> None:
        pins = self._require_pins()
        pm = pins.pin_map
        if pin == pm.shift_clock and level == HIGH:
            bit = 1 if pins.level(pm.shift_data) else 0
            self.shift_register = ((self.shift_register << 1) | bit) & ADDRESS_MASK
        elif pin == pm.write_enable:
            if level == LOW:
                self._latched_address = self.address
            else:
                self._commit_write(now_us)

    def _commit_write(self, now_us: float) -> None:
        pins = self._require_pins()
        address = self._latched_address
        if now_us < self._busy_until:
            self.stats.dropped_writes += 1
            self.stats.dropped_addresses.append(address)
            logger.debug("Write to 0x%04X dropped during write cycle", address)
            return
        value = 0
        for n, pin in enumerate(pins.pin_map.data):
            if pins.level(pin):
                value |= 1 << n
        self.memory[address] = value
        self.stats.writes += 1
        self._busy_until = now_us + self.write_cycle_us

    def output_bit(self, index: int) -> bool:
        return bool((self.memory[self.address] >> index) & 1)


class SimulatedPins(PinInterface):
    """GPIO model with a virtual microsecond clock."""

    def __init__(self, pin_map: Optional[PinMap] = None, device: Optional[SimulatedEeprom] = None) -> None:
        self.pin_map = pin_map or PinMap()
        self.now_us = 0.0
        self._modes: Dict[int, PinMode] = {}
        self._levels: Dict[int, bool] = {pin: LOW for pin in self.pin_map.all_pins()}
        # WE and OE have pull-ups on the board.
        self._levels[self.pin_map.write_enable] = HIGH
        self._levels[self.pin_map.output_enable] = HIGH
        self._data_index = {pin: n for n, pin in enumerate(self.pin_map.data)}
        self.device = device
        if device is not None:
            device.attach(self)

    def _check_pin(self, pin: int) -> None:
        if pin not in self._levels:
            raise ValueError(f"Pin {pin} is not wired on the programmer board")

    def mode(self, pin: int) -> Optional[PinMode]:
        return self._modes.get(pin)

    def level(self, pin: int) -> bool:
        return self._levels[pin]

    def configure(self, pin: int, mode: PinMode) -> None:
        self._check_pin(pin)
        self._modes[pin] = mode

    def write(self, pin: int, level: bool) -> None:
        self._check_pin(pin)
        if self._modes.get(pin) is not PinMode.OUTPUT:
            raise ValueError(f"Pin {pin} is not configured as an output")
        level = bool(level)
        previous = self._levels[pin]
        self._levels[pin] = level
        if self.device is not None and previous != level:
            self.device.on_edge(pin, level, self.now_us)

    def read(self, pin: int) -> bool:
        self._check_pin(pin)
        index = self._data_index.get(pin)
        if self.device is not None and index is not None and self.device.driving():
            if self._modes.get(pin) is PinMode.OUTPUT:
                self.device.stats.contention += 1
            return self.device.output_bit(index)
        return self._levels[pin]

    def delay_us(self, microseconds: float) -> None:
        if microseconds > 0:
            self.now_us += microseconds


def simulated_board(
    size: int,
    pin_map: Optional[PinMap] = None,
    *,
    write_cycle_us: float = DEFAULT_WRITE_CYCLE_US,
) -> SimulatedPins:
    """Pins wired to a blank EEPROM of ``size`` bytes."""
    device = SimulatedEeprom(size, write_cycle_us=write_cycle_us)
    return SimulatedPins(pin_map, device)
