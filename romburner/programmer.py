"""One-shot programming run: write the image, then dump it back.

The run is open loop. Nothing is read back while writing and nothing is
compared here; a bad write only shows up as a difference between the dump
and an independently built image (see ``romburner.dump.compare_dump``).
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional, TextIO

from .config import ProgrammerConfig
from .dump import DumpWriter, StatusWriter
from .encoding.variants import RomVariant
from .errors import ConfigError, ProgrammerStateError
from .hardware.bus import BusDirection, DeviceBus
from .hardware.sequencer import AddressSequencer

logger = logging.getLogger(__name__)


class ProgrammerState(Enum):
    IDLE = auto()
    PROGRAMMING = auto()
    VERIFYING = auto()


class Programmer:
    """Drives ``bus`` through IDLE -> PROGRAMMING -> VERIFYING.

    VERIFYING is terminal: the image cannot be written twice with the same
    instance. Status text and the dump go to ``out``.
    """

    def __init__(
        self,
        bus: DeviceBus,
        variant: RomVariant,
        out: TextIO,
        config: Optional[ProgrammerConfig] = None,
    ) -> None:
        self.bus = bus
        self.variant = variant
        self.out = out
        if config is None:
            config = ProgrammerConfig(variant=variant.name)
        elif config.variant.lower() != variant.name:
            # Device size and dump range come from the config.
            raise ConfigError(
                f"Configuration is for the '{config.variant}' ROM, not '{variant.name}'"
            )
        self.config = config
        self.device_size = self.config.resolved_device_size()
        self.sequencer = AddressSequencer(bus)
        self.status = StatusWriter(out)
        self.state = ProgrammerState.IDLE

    def _transition(self, expected: ProgrammerState, new: ProgrammerState) -> None:
        if self.state is not expected:
            raise ProgrammerStateError(
                f"Cannot enter {new.name} from {self.state.name}"
            )
        logger.debug("Programmer %s -> %s", self.state.name, new.name)
        self.state = new

    def _progress(self, address: int) -> None:
        if (address + 1) % self.config.progress_page == 0:
            self.status.page()

    def program(self) -> int:
        """Write every device address; returns the number of bytes written."""
        self._transition(ProgrammerState.IDLE, ProgrammerState.PROGRAMMING)
        variant = self.variant
        logical_end = min(variant.logical_size, self.device_size)

        logger.info(
            "Programming %s image: 0x%04X bytes", variant.name, self.device_size
        )
        self.status.begin()
        written = self.sequencer.sweep(
            0,
            logical_end,
            BusDirection.OUTPUT,
            source=variant.encode,
            after_each=self._progress,
        )
        if logical_end < self.device_size:
            logger.info(
                "Filling 0x%04X..0x%04X with 0x%02X",
                logical_end,
                self.device_size,
                variant.fill,
            )
            fill = variant.fill
            written += self.sequencer.sweep(
                logical_end,
                self.device_size,
                BusDirection.OUTPUT,
                source=lambda _address: fill,
                after_each=self._progress,
            )
        self.status.finish()

        # Hand the bus over to the read path with output-enable asserted.
        self.bus.set_direction(BusDirection.INPUT)
        self._transition(ProgrammerState.PROGRAMMING, ProgrammerState.VERIFYING)
        logger.info("Programming finished: %d bytes written", written)
        return written

    def dump(self, begin: Optional[int] = None, end: Optional[int] = None) -> int:
        """Read ``[begin, end)`` back and write it to ``out`` as hex."""
        if self.state is not ProgrammerState.VERIFYING:
            raise ProgrammerStateError(
                f"Dump requires a programmed device (state {self.state.name})"
            )
        default_begin, default_end = self.config.dump_range()
        begin = default_begin if begin is None else begin
        end = default_end if end is None else end
        writer = DumpWriter(self.out)
        count = self.sequencer.sweep(begin, end, BusDirection.INPUT, sink=writer)
        logger.debug("Dumped 0x%04X..0x%04X", begin, end)
        return count

    def run(self) -> int:
        """Program, then dump the configured range."""
        written = self.program()
        self.dump()
        return written
