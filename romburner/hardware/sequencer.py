"""Ascending address sweeps shared by the write and read paths."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .bus import BusDirection, DeviceBus

logger = logging.getLogger(__name__)

ByteSource = Callable[[int], int]
ByteSink = Callable[[int, int], None]
AddressHook = Callable[[int], None]


class AddressSequencer:
    """Walks ``[begin, end)`` presenting one address at a time.

    On the write path each address gets its byte from ``source``; on the
    read path each byte read is handed to ``sink``. Every address is a
    complete present/transfer cycle, so an interrupted sweep leaves the
    addresses it already visited intact and touches no others.
    """

    def __init__(self, bus: DeviceBus) -> None:
        self.bus = bus

    def sweep(
        self,
        begin: int,
        end: int,
        direction: BusDirection,
        *,
        source: Optional[ByteSource] = None,
        sink: Optional[ByteSink] = None,
        after_each: Optional[AddressHook] = None,
    ) -> int:
        """Run one sweep; returns the number of addresses visited."""
        if direction is BusDirection.OUTPUT and source is None:
            raise ValueError("An output sweep needs a byte source")
        if direction is BusDirection.INPUT and sink is None:
            raise ValueError("An input sweep needs a byte sink")
        if end < begin:
            raise ValueError(f"Empty sweep range 0x{begin:X}..0x{end:X}")

        if self.bus.direction is not direction:
            self.bus.set_direction(direction)

        logger.debug("Sweep %s 0x%04X..0x%04X", direction.value, begin, end)
        for address in range(begin, end):
            self.bus.present_address(address)
            if direction is BusDirection.OUTPUT:
                self.bus.write_byte(source(address) & 0xFF)
            else:
                sink(address, self.bus.read_byte())
            if after_each is not None:
                after_each(address)
        return end - begin
