"""Transport capability consumed by the controller.

The packet protocol is write-only, so a transport only has to accept
bytes and change its own baud rate. Anything with these two methods
works: a :class:`~.serial_connection.SerialConnection`, a shared-port
wrapper that adds locking, or an in-memory double in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    def write(self, data: bytes) -> None:
        """Write all of ``data`` or raise ``TransportError``."""

    def set_baud_rate(self, baud_rate: int) -> None:
        """Reconfigure the local side of the link."""
