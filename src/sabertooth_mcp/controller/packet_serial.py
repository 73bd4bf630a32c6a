"""Sabertooth 2x60 driver using the packet serial protocol.

Every operation builds one 4-byte frame and writes it to the transport.
The protocol is fire-and-forget: nothing is read back, so a successful
call means the bytes left the port, not that the device accepted them.
"""

from __future__ import annotations

import logging

from ..errors import SabertoothError, TransportError
from ..protocol import commands
from ..protocol.commands import DEFAULT_ADDRESS, check_int_range
from ..transport.base import Transport
from ..transport.serial_connection import DEFAULT_BAUD_RATE, SerialConnection
from .base import Sabertooth2x60

logger = logging.getLogger(__name__)


class PacketSerial(Sabertooth2x60):
    """Packet serial interface to one addressed Sabertooth.

    The instance owns ``transport``. To share a port between several
    addresses, wrap it in a transport that serializes writes.

    Usage::

        saber = PacketSerial.open("/dev/ttyUSB0").with_address(129)
        saber.drive_mixed(64)
        saber.turn_mixed(-20)
        saber.stop()
    """

    def __init__(self, transport: Transport, address: int = DEFAULT_ADDRESS) -> None:
        self._transport = transport
        self._address = check_int_range("address", address, 0, 255)

    @classmethod
    def open(cls, port: str, baud_rate: int = DEFAULT_BAUD_RATE) -> PacketSerial:
        """Open a serial port and return a driver with the default address."""
        return cls(SerialConnection(port, baud_rate=baud_rate).open())

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def address(self) -> int:
        return self._address

    @address.setter
    def address(self, address: int) -> None:
        self._address = check_int_range("address", address, 0, 255)

    def with_address(self, address: int) -> PacketSerial:
        """Set the device address and return ``self`` for chaining."""
        self.address = address
        return self

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def _write(self, frame: bytes) -> None:
        logger.debug("TX -> %s", frame.hex(" "))
        try:
            self._transport.write(frame)
        except SabertoothError:
            raise
        except OSError as e:
            raise TransportError.from_exception(e) from e

    def set_min_voltage(self, units: int) -> None:
        self._write(commands.build_set_min_voltage(self._address, units))

    def set_max_voltage(self, units: int) -> None:
        self._write(commands.build_set_max_voltage(self._address, units))

    def set_serial_timeout(self, ms: int) -> None:
        self._write(commands.build_set_serial_timeout(self._address, ms))

    def set_baud_rate(self, baud_rate: int) -> None:
        self._write(commands.build_set_baud_rate(self._address, baud_rate))
        try:
            self._transport.set_baud_rate(baud_rate)
        except SabertoothError:
            raise
        except OSError as e:
            raise TransportError.from_exception(e) from e

    def set_ramping(self, rate: int) -> None:
        self._write(commands.build_set_ramping(self._address, rate))

    def set_deadband(self, deadband: int) -> None:
        self._write(commands.build_set_deadband(self._address, deadband))

    def drive_m1(self, value: int) -> None:
        self._write(commands.build_drive_m1(self._address, value))

    def drive_m2(self, value: int) -> None:
        self._write(commands.build_drive_m2(self._address, value))

    def drive_mixed(self, value: int) -> None:
        self._write(commands.build_drive_mixed(self._address, value))

    def turn_mixed(self, value: int) -> None:
        self._write(commands.build_turn_mixed(self._address, value))

    def __repr__(self) -> str:
        return f"PacketSerial(address={self._address}, transport={self._transport!r})"
