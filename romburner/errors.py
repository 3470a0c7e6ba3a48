"""Exception types raised by the ROM programmer."""


class RomBurnerError(Exception):
    pass


class ProgrammerStateError(RomBurnerError):
    """Raised when the programming driver is used out of order."""


class ConfigError(RomBurnerError):
    pass


class DumpFormatError(RomBurnerError):
    """Raised when a verification dump cannot be parsed."""
