"""Configuration system for the ROM programmer."""

from .programmer_config import PinMap, ProgrammerConfig

__all__ = ["PinMap", "ProgrammerConfig"]
