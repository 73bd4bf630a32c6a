"""Shared fixtures: an in-memory transport that records every write."""

from __future__ import annotations

import pytest

from sabertooth_mcp.controller.packet_serial import PacketSerial


class RecordingTransport:
    """Transport double; set ``fail_write`` / ``fail_baud`` to inject errors."""

    def __init__(self, port: str = "fake", baud_rate: int = 9600) -> None:
        self.port = port
        self.baud_rate = baud_rate
        self.connected = False
        self.writes: list[bytes] = []
        self.baud_changes: list[int] = []
        self.fail_write: BaseException | None = None
        self.fail_baud: BaseException | None = None

    def open(self) -> RecordingTransport:
        self.connected = True
        return self

    def close(self) -> None:
        self.connected = False

    def write(self, data: bytes) -> None:
        if self.fail_write is not None:
            raise self.fail_write
        self.writes.append(bytes(data))

    def set_baud_rate(self, baud_rate: int) -> None:
        if self.fail_baud is not None:
            raise self.fail_baud
        self.baud_changes.append(baud_rate)
        self.baud_rate = baud_rate


@pytest.fixture
def transport_factory():
    return RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport().open()


@pytest.fixture
def saber(transport) -> PacketSerial:
    return PacketSerial(transport)
