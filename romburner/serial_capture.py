"""Capture a programmer's status and dump text from its serial console."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

import serial

from .constants import STATUS_FINISHED, STATUS_HEADER
from .errors import DumpFormatError

logger = logging.getLogger(__name__)

# Lines tolerated before the status header while the board boots.
MAX_PREAMBLE_LINES = 16


class SerialDumpReader:
    """Reads the protocol text sent by a programmer board."""

    def __init__(
        self,
        port: str,
        baudrate: int = 57600,
        timeout: float = 5,
        serial_cls=serial.Serial,
    ) -> None:
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.serial_cls = serial_cls
        self.conn: Optional[serial.Serial] = None

    def __enter__(self):
        logger.info("Opening %s at %d baud", self.port, self.baudrate)
        self.conn = self.serial_cls(self.port, self.baudrate, timeout=self.timeout)
        time.sleep(2)  # Opening the port resets the board
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn and self.conn.is_open:
            self.conn.close()
        logger.info("Closed %s", self.port)

    def _readline(self) -> str:
        if not self.conn:
            raise ConnectionError("Serial port not open.")
        raw = self.conn.readline()
        if not raw:
            raise DumpFormatError(
                f"Timed out after {self.timeout}s waiting for programmer output"
            )
        # Reset noise is not ASCII; the protocol text always is.
        return raw.decode("ascii", errors="replace")

    def _read_header(self) -> str:
        """Skip reset noise up to the ``Programming`` header."""
        for _ in range(MAX_PREAMBLE_LINES):
            line = self._readline()
            start = line.find(STATUS_HEADER)
            if start >= 0:
                if start:
                    logger.debug("Skipped %r before the header", line[:start])
                return line[start:]
            logger.debug("Skipped preamble line %r", line)
        raise DumpFormatError(
            f"No '{STATUS_HEADER}' header within {MAX_PREAMBLE_LINES} lines"
        )

    def read_dump(self, byte_count: int) -> str:
        """Read until ``Finished`` and ``byte_count`` dumped bytes have arrived.

        Returns the text from the status header on, noise before it dropped.
        """
        line = self._read_header()
        chunks: List[str] = [line]
        while line.strip() != STATUS_FINISHED.strip():
            line = self._readline()
            chunks.append(line)

        received = 0
        while received < byte_count:
            line = self._readline()
            chunks.append(line)
            received += len(line.split())
        logger.info("Received %d dumped bytes", received)
        return "".join(chunks)
