"""Programmer configuration: pin assignment, timings, and sweep ranges."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Optional, Tuple

from ..constants import (
    DEFAULT_ADDRESS_SETTLE_US,
    DEFAULT_PROGRESS_PAGE,
    DEFAULT_READ_SETTLE_US,
    DEFAULT_WRITE_PULSE_US,
    DEFAULT_WRITE_SETTLE_MS,
)
from ..encoding.variants import RomVariant, get_variant
from ..errors import ConfigError

logger = logging.getLogger(__name__)

_INT_FIELDS = ("device_size", "progress_page", "dump_begin", "dump_end")
_TIMING_FIELDS = (
    "address_settle_us",
    "write_settle_ms",
    "write_pulse_us",
    "read_settle_us",
)


def _as_int(value):
    """Sizes and addresses may be written as strings, e.g. ``"0x800"``."""
    if isinstance(value, str):
        return int(value, 0)
    return value


@dataclass
class PinMap:
    """Controller pin numbers wired to the programmer board."""

    shift_data: int = 2
    shift_clock: int = 3
    # D0 first; the byte's LSB goes to data[0].
    data: Tuple[int, ...] = (5, 6, 7, 8, 9, 10, 11, 12)
    write_enable: int = 13
    output_enable: int = 14

    def all_pins(self) -> Tuple[int, ...]:
        return (
            self.shift_data,
            self.shift_clock,
            *self.data,
            self.write_enable,
            self.output_enable,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "PinMap":
        values = {name: _as_int(value) for name, value in data.items()}
        if "data" in values:
            values["data"] = tuple(_as_int(p) for p in values["data"])
        return cls(**values)


@dataclass
class ProgrammerConfig:
    """Settings for one programming run."""

    variant: str = "control"
    device_size: Optional[int] = None  # None: the variant's part size
    address_settle_us: float = DEFAULT_ADDRESS_SETTLE_US
    write_settle_ms: float = DEFAULT_WRITE_SETTLE_MS
    write_pulse_us: float = DEFAULT_WRITE_PULSE_US
    read_settle_us: float = DEFAULT_READ_SETTLE_US
    progress_page: int = DEFAULT_PROGRESS_PAGE
    dump_begin: int = 0
    dump_end: Optional[int] = None  # None: end of the device
    pins: PinMap = field(default_factory=PinMap)

    def rom_variant(self) -> RomVariant:
        try:
            return get_variant(self.variant)
        except KeyError as e:
            raise ConfigError(str(e)) from e

    def resolved_device_size(self) -> int:
        if self.device_size is None:
            return self.rom_variant().device_size
        return self.device_size

    def dump_range(self) -> Tuple[int, int]:
        size = self.resolved_device_size()
        end = size if self.dump_end is None else self.dump_end
        if end > size:
            logger.warning(
                "Dump end 0x%04X is past the device size 0x%04X; clipping", end, size
            )
            end = size
        return self.dump_begin, end

    def _check_types(self) -> None:
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if value is None and name in ("device_size", "dump_end"):
                continue
            if not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        for name in _TIMING_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
        if not all(isinstance(pin, int) for pin in self.pins.all_pins()):
            raise ConfigError("Pin numbers must be integers")

    def validate(self) -> "ProgrammerConfig":
        self._check_types()
        variant = self.rom_variant()
        size = self.resolved_device_size()
        if size <= 0 or size > 0x10000:
            raise ConfigError(f"Device size 0x{size:X} out of range")
        if size & (size - 1):
            raise ConfigError(f"Device size 0x{size:X} is not a power of two")
        if size < variant.logical_size:
            logger.warning(
                "Device size 0x%04X is smaller than the %s table (0x%04X)",
                size,
                variant.name,
                variant.logical_size,
            )
        for name in _TIMING_FIELDS:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        if self.write_settle_ms == 0:
            logger.warning("Write settle delay is zero; the device may drop writes")
        if self.progress_page <= 0:
            raise ConfigError("progress_page must be positive")
        if len(self.pins.data) != 8:
            raise ConfigError(f"Expected 8 data pins, got {len(self.pins.data)}")
        if len(set(self.pins.all_pins())) != len(self.pins.all_pins()):
            raise ConfigError("Pin assignments overlap")
        begin, end = self.dump_range()
        if not 0 <= begin <= end:
            raise ConfigError(f"Invalid dump range 0x{begin:X}..0x{end:X}")
        return self

    def to_dict(self) -> dict:
        data = asdict(self)
        data["pins"]["data"] = list(self.pins.data)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ProgrammerConfig":
        try:
            values = dict(data)
            pins = values.pop("pins", None)
            for name in _INT_FIELDS:
                if isinstance(values.get(name), str):
                    values[name] = _as_int(values[name])
            for name in _TIMING_FIELDS:
                if isinstance(values.get(name), str):
                    values[name] = float(values[name])
            config = cls(**values)
            if pins is not None:
                config.pins = PinMap.from_dict(pins)
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
        return config

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> "ProgrammerConfig":
        """Load configuration from JSON file."""
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read configuration '{path}': {e}") from e
        return cls.from_dict(data).validate()

    @classmethod
    def for_variant(cls, variant: str, **overrides) -> "ProgrammerConfig":
        return cls(variant=variant, **overrides).validate()
