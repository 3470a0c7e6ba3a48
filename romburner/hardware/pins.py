"""Digital pin access used by the bit-banged programmer bus."""

from __future__ import annotations

import enum
import logging
import time
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

LOW = False
HIGH = True


class PinMode(enum.Enum):
    OUTPUT = "output"
    INPUT = "input"


class PinInterface(ABC):
    """Minimal GPIO surface: direction, level, and blocking delays."""

    @abstractmethod
    def configure(self, pin: int, mode: PinMode) -> None:
        pass

    @abstractmethod
    def write(self, pin: int, level: bool) -> None:
        pass

    @abstractmethod
    def read(self, pin: int) -> bool:
        pass

    @abstractmethod
    def delay_us(self, microseconds: float) -> None:
        """Block for at least ``microseconds``."""
        pass

    def delay_ms(self, milliseconds: float) -> None:
        self.delay_us(milliseconds * 1000.0)

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class RPiGpioPins(PinInterface):
    """Raspberry Pi GPIO backend (BCM numbering).

    ``RPi.GPIO`` is imported on construction so the rest of the package
    works on machines without it.
    """

    def __init__(self, gpio=None) -> None:
        if gpio is None:
            import RPi.GPIO as gpio  # type: ignore[import-not-found]
        self._gpio = gpio
        self._gpio.setmode(self._gpio.BCM)
        self._gpio.setwarnings(False)

    def configure(self, pin: int, mode: PinMode) -> None:
        direction = self._gpio.OUT if mode is PinMode.OUTPUT else self._gpio.IN
        self._gpio.setup(pin, direction)

    def write(self, pin: int, level: bool) -> None:
        self._gpio.output(pin, self._gpio.HIGH if level else self._gpio.LOW)

    def read(self, pin: int) -> bool:
        return bool(self._gpio.input(pin))

    def delay_us(self, microseconds: float) -> None:
        if microseconds > 0:
            time.sleep(microseconds / 1_000_000)

    def close(self) -> None:
        logger.debug("Releasing GPIO pins")
        self._gpio.cleanup()
