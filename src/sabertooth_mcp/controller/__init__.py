"""Motor controller command surface and its packet serial implementation."""

from .base import Sabertooth2x60
from .packet_serial import PacketSerial
