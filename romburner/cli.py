#!/usr/bin/env python3
"""Command line front end: build images, list microcode, program and check ROMs."""

import logging
import sys
from typing import Optional

import serial
from plumbum import cli  # type: ignore[import-untyped]

from . import __version__
from .config import ProgrammerConfig
from .dump import compare_dump, parse_dump
from .encoding.variants import VARIANTS
from .errors import RomBurnerError
from .hardware.bus import BusTiming, PinBus
from .hardware.pins import PinInterface, RPiGpioPins
from .hardware.simulated import simulated_board
from .image import FORMATS, build_image, export_image
from .listing import format_listing
from .programmer import Programmer
from .serial_capture import SerialDumpReader

logger = logging.getLogger(__name__)

VariantName = cli.Set(*VARIANTS, case_sensitive=False)

# Mismatches printed before the summary line.
MAX_REPORTED = 32


class RomBurnerCLI(cli.Application):
    """Synthesizes display and control-store ROM images and burns them."""

    PROGNAME = "romburner"
    VERSION = __version__

    verbose = cli.Flag(["-v", "--verbose"], help="Log progress to stderr")

    def main(self, *args) -> int:
        logging.basicConfig(
            level=logging.DEBUG if self.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        if args:
            print(f"Unknown command: {args[0]}", file=sys.stderr)
            return 1
        if not self.nested_command:
            self.help()
            return 1
        return 0


class _ConfiguredCommand(cli.Application):
    config_file = cli.SwitchAttr(
        ["-c", "--config"], cli.ExistingFile, help="JSON programmer configuration"
    )

    def load_config(self, variant: str) -> ProgrammerConfig:
        if self.config_file:
            config = ProgrammerConfig.load(self.config_file)
            config.variant = variant
            return config.validate()
        return ProgrammerConfig.for_variant(variant)


@RomBurnerCLI.subcommand("image")
class ImageCommand(_ConfiguredCommand):
    """Write the expected device image to a file."""

    output_file = cli.SwitchAttr(
        ["-o", "--output"], str, mandatory=True, help="Output file path"
    )
    fmt = cli.SwitchAttr(
        ["-f", "--format"], cli.Set(*FORMATS), default="bin", help="Image file format"
    )

    def main(self, variant: VariantName) -> int:
        try:
            config = self.load_config(variant)
            image = build_image(config.rom_variant(), config.resolved_device_size())
            export_image(image, self.output_file, self.fmt)
        except (RomBurnerError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Wrote {len(image)} bytes to '{self.output_file}'.")
        return 0


@RomBurnerCLI.subcommand("listing")
class ListingCommand(cli.Application):
    """Print every control-store slot with its micro-steps."""

    def main(self) -> int:
        sys.stdout.write(format_listing())
        return 0


class _ProgramCommand(_ConfiguredCommand):
    """Shared program-and-dump run; not registered as a subcommand.

    Subcommands override ``open_pins`` to pick the pin backend.
    """

    def open_pins(self, config: ProgrammerConfig) -> PinInterface:
        raise NotImplementedError(
            f"{type(self).__name__} does not provide a pin backend"
        )

    def main(self, variant: VariantName) -> int:
        try:
            config = self.load_config(variant)
            with self.open_pins(config) as pins:
                bus = PinBus(pins, config.pins, BusTiming.from_config(config))
                programmer = Programmer(bus, config.rom_variant(), sys.stdout, config)
                programmer.run()
        except ImportError as e:
            print(f"Error: GPIO backend unavailable: {e}", file=sys.stderr)
            return 1
        except RomBurnerError as e:
            print(f"\nError: {e}", file=sys.stderr)
            return 1
        sys.stdout.flush()
        return 0


@RomBurnerCLI.subcommand("simulate")
class SimulateCommand(_ProgramCommand):
    """Run the programming protocol against a simulated EEPROM."""

    write_cycle_us = cli.SwitchAttr(
        "--write-cycle-us", float, default=1000.0, help="Simulated device write cycle"
    )

    def open_pins(self, config: ProgrammerConfig) -> PinInterface:
        return simulated_board(
            config.resolved_device_size(),
            config.pins,
            write_cycle_us=self.write_cycle_us,
        )


@RomBurnerCLI.subcommand("program")
class ProgramCommand(_ProgramCommand):
    """Burn a ROM through the Raspberry Pi GPIO programmer board."""

    def open_pins(self, config: ProgrammerConfig) -> PinInterface:
        return RPiGpioPins()


@RomBurnerCLI.subcommand("check")
class CheckCommand(_ConfiguredCommand):
    """Compare a programmer's dump with the expected image."""

    port = cli.SwitchAttr(["-p", "--port"], str, help="Serial port of the programmer")
    baudrate = cli.SwitchAttr(["-b", "--baud"], int, default=57600)
    dump_file = cli.SwitchAttr(
        ["-i", "--input"], cli.ExistingFile, help="Saved programmer output"
    )

    def _read_text(self, byte_count: int) -> str:
        if self.dump_file:
            with open(self.dump_file, "r") as f:
                return f.read()
        if not self.port:
            raise RomBurnerError("Either --port or --input is required")
        with SerialDumpReader(self.port, self.baudrate) as reader:
            return reader.read_dump(byte_count)

    def main(self, variant: VariantName) -> int:
        try:
            config = self.load_config(variant)
            begin, end = config.dump_range()
            text = self._read_text(end - begin)
            parsed = parse_dump(text)
            expected = build_image(config.rom_variant(), config.resolved_device_size())
            mismatches = compare_dump(expected, parsed.data, begin, end)
        except (RomBurnerError, OSError, serial.SerialException) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if not parsed.finished:
            print("Warning: programmer output has no 'Finished' marker", file=sys.stderr)
        for mismatch in mismatches[:MAX_REPORTED]:
            print(mismatch)
        if len(mismatches) > MAX_REPORTED:
            print(f"... {len(mismatches) - MAX_REPORTED} more")
        status = "OK" if not mismatches else "MISMATCH"
        print(
            f"{status}: {len(parsed.data)} bytes checked, {len(mismatches)} differences"
        )
        return 0 if not mismatches else 1


def main(argv: Optional[list] = None) -> None:
    RomBurnerCLI.run(argv)


if __name__ == "__main__":
    RomBurnerCLI.run()
