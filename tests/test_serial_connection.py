"""Tests for the pyserial transport using the loop:// URL handler."""

import pytest

from sabertooth_mcp.controller import PacketSerial
from sabertooth_mcp.errors import TransportError, TransportErrorKind
from sabertooth_mcp.protocol.commands import Command
from sabertooth_mcp.protocol.framing import parse_frame, split_frames
from sabertooth_mcp.transport import SerialConnection, Transport


@pytest.fixture
def loop():
    conn = SerialConnection("loop://", timeout=0.1)
    conn.open()
    yield conn
    conn.close()


def test_satisfies_transport_protocol():
    assert isinstance(SerialConnection("loop://"), Transport)


def test_open_close(loop):
    assert loop.connected
    loop.close()
    assert not loop.connected


def test_open_twice_is_noop(loop):
    assert loop.open() is loop
    assert loop.connected


def test_context_manager():
    with SerialConnection("loop://") as conn:
        assert conn.connected
    assert not conn.connected


def test_write_loops_back(loop):
    loop.write(b"\x80\x00\x64\x64")
    assert loop.read(4) == b"\x80\x00\x64\x64"


def test_read_times_out_empty(loop):
    assert loop.read(4) == b""


def test_write_when_closed():
    conn = SerialConnection("loop://")
    with pytest.raises(TransportError) as exc_info:
        conn.write(b"\x00")
    assert exc_info.value.transport_kind == TransportErrorKind.NO_DEVICE


def test_open_missing_device():
    conn = SerialConnection("/dev/sabertooth-does-not-exist")
    with pytest.raises(TransportError) as exc_info:
        conn.open()
    assert exc_info.value.transport_kind == TransportErrorKind.NO_DEVICE
    assert not conn.connected


def test_open_unknown_url_scheme():
    with pytest.raises(TransportError) as exc_info:
        SerialConnection("nosuchscheme://x").open()
    assert exc_info.value.transport_kind == TransportErrorKind.INVALID_INPUT


def test_set_baud_rate(loop):
    loop.set_baud_rate(38400)
    assert loop.baud_rate == 38400


def test_set_invalid_baud_rate(loop):
    with pytest.raises(TransportError) as exc_info:
        loop.set_baud_rate(-1)
    assert exc_info.value.transport_kind == TransportErrorKind.INVALID_INPUT
    assert loop.baud_rate == 9600


def test_packet_serial_over_loopback(loop):
    saber = PacketSerial(loop).with_address(129)
    saber.drive_mixed(-128)
    saber.set_baud_rate(19200)

    frames = split_frames(loop.read(8))
    assert [(f.address, f.command, f.data) for f in frames] == [
        (129, Command.DRIVE_BACKWARD_MIXED, 127),
        (129, Command.BAUD_RATE, 3),
    ]
    assert loop.baud_rate == 19200


def test_packet_serial_open():
    saber = PacketSerial.open("loop://")
    try:
        saber.drive_m1(100)
        assert parse_frame(saber.transport.read(4)).data == 100
    finally:
        saber.close()
    assert not saber.transport.connected
