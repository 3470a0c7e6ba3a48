"""Programmer board access: pins, byte bus, and address sweeps."""

from .bus import BusDirection, BusTiming, DeviceBus, MemoryBus, PinBus
from .pins import PinInterface, PinMode, RPiGpioPins
from .sequencer import AddressSequencer
from .simulated import SimulatedEeprom, SimulatedPins, simulated_board

__all__ = [
    "AddressSequencer",
    "BusDirection",
    "BusTiming",
    "DeviceBus",
    "MemoryBus",
    "PinBus",
    "PinInterface",
    "PinMode",
    "RPiGpioPins",
    "SimulatedEeprom",
    "SimulatedPins",
    "simulated_board",
]
