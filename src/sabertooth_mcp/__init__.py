"""Packet serial driver and MCP server for the Sabertooth 2x60 motor controller."""

from .controller import PacketSerial, Sabertooth2x60
from .errors import (
    ErrorKind,
    InvalidInputError,
    ResponseMalformedError,
    SabertoothError,
    TransportError,
    TransportErrorKind,
    UnknownError,
)
from .protocol.commands import DEFAULT_ADDRESS

__version__ = "0.1.0"
