"""Materialized device images and their export formats."""

from __future__ import annotations

import logging
from typing import Optional

import bincopy  # type: ignore[import-untyped]

from .encoding.variants import RomVariant

logger = logging.getLogger(__name__)

FORMATS = ("bin", "ihex", "srec")


def build_image(variant: RomVariant, size: Optional[int] = None) -> bytes:
    """Expected contents of every device address, fill included."""
    if size is None:
        size = variant.device_size
    return bytes(variant.byte_at(address) for address in range(size))


def to_binfile(image: bytes) -> bincopy.BinFile:
    binfile = bincopy.BinFile()
    binfile.add_binary(image, address=0)
    return binfile


def export_image(image: bytes, path: str, fmt: str = "bin") -> None:
    """Write ``image`` as raw binary, Intel HEX, or Motorola S-records."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown image format '{fmt}' (expected one of: {FORMATS})")
    binfile = to_binfile(image)
    if fmt == "bin":
        with open(path, "wb") as f:
            f.write(binfile.as_binary())
    elif fmt == "ihex":
        with open(path, "w") as f:
            f.write(binfile.as_ihex())
    else:
        with open(path, "w") as f:
            f.write(binfile.as_srec())
    logger.info("Wrote %d bytes to %s (%s)", len(image), path, fmt)


def load_image(path: str) -> bytes:
    """Read an image written by ``export_image`` (format from the contents)."""
    with open(path, "rb") as f:
        raw = f.read()
    binfile = bincopy.BinFile()
    try:
        binfile.add(raw.decode("ascii"))
    except (UnicodeDecodeError, bincopy.UnsupportedFileFormatError):
        binfile = bincopy.BinFile()
        binfile.add_binary(raw, address=0)
    return bytes(binfile.as_binary())
