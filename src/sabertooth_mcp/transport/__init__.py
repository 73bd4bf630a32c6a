"""Transport layer: the write/set-baud capability and its pyserial implementation."""

from .base import Transport
from .serial_connection import SerialConnection
