"""Serial connection to the Sabertooth via pyserial.

Ports are opened with :func:`serial.serial_for_url`, so besides device
paths such as ``/dev/ttyUSB0`` or ``COM3`` any pyserial URL works, e.g.
``loop://`` for bench testing without hardware.
"""

from __future__ import annotations

import logging

import serial

from ..errors import TransportError, TransportErrorKind

logger = logging.getLogger(__name__)

DEFAULT_BAUD_RATE = 9600
DEFAULT_TIMEOUT = 1.0
DEFAULT_WRITE_TIMEOUT = 1.0


class SerialConnection:
    """Manages the serial link to the motor driver.

    Usage::

        conn = SerialConnection("/dev/ttyUSB0")
        conn.open()
        conn.write(frame_bytes)
        conn.close()
    """

    def __init__(
        self,
        port: str,
        baud_rate: int = DEFAULT_BAUD_RATE,
        timeout: float = DEFAULT_TIMEOUT,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
    ) -> None:
        self._port = port
        self._baud_rate = baud_rate
        self._timeout = timeout
        self._write_timeout = write_timeout
        self._serial: serial.SerialBase | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    @property
    def port(self) -> str:
        return self._port

    @property
    def baud_rate(self) -> int:
        return self._baud_rate

    def open(self) -> SerialConnection:
        """Open the serial port.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self.connected:
            return self

        try:
            self._serial = serial.serial_for_url(
                self._port,
                baudrate=self._baud_rate,
                timeout=self._timeout,
                write_timeout=self._write_timeout,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            err = TransportError.from_exception(e)
            raise TransportError(
                err.transport_kind,
                f"Could not open serial port {self._port!r} at "
                f"{self._baud_rate} baud. Ensure the device is connected "
                f"and you have permissions. Last error: {e}",
                source=e,
            ) from e

        logger.info("Connected to %s at %d baud", self._port, self._baud_rate)
        return self

    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._serial = None
            logger.info("Disconnected from %s", self._port)

    def _require_open(self) -> serial.SerialBase:
        if not self.connected:
            raise TransportError(
                TransportErrorKind.NO_DEVICE, f"Serial port {self._port!r} is not open"
            )
        return self._serial

    def write(self, data: bytes) -> None:
        """Write all of ``data``, blocking until done or the write times out.

        Raises:
            TransportError: If not connected or the write fails.
        """
        port = self._require_open()
        try:
            written = port.write(data)
            port.flush()
        except (serial.SerialException, OSError) as e:
            raise TransportError.from_exception(e) from e

        if written is not None and written != len(data):
            raise TransportError(
                TransportErrorKind.IO,
                f"Short write: {written} of {len(data)} bytes",
            )

    def read(self, size: int = 1) -> bytes:
        """Read up to ``size`` bytes, returning early on timeout.

        The packet protocol never reads; this exists for loopback checks.
        """
        port = self._require_open()
        try:
            return port.read(size)
        except (serial.SerialException, OSError) as e:
            raise TransportError.from_exception(e) from e

    def set_baud_rate(self, baud_rate: int) -> None:
        """Change the baud rate of the open port.

        Raises:
            TransportError: If the port rejects the new rate.
        """
        port = self._require_open()
        try:
            port.baudrate = baud_rate
        except (serial.SerialException, OSError, ValueError) as e:
            raise TransportError.from_exception(e) from e

        logger.info("Baud rate of %s changed %d -> %d", self._port, self._baud_rate, baud_rate)
        self._baud_rate = baud_rate

    def __enter__(self) -> SerialConnection:
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
