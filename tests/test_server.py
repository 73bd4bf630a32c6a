"""Tests for the MCP server tools against a recording transport."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from sabertooth_mcp.protocol.commands import Command
from sabertooth_mcp.protocol.framing import parse_frame


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("sabertooth_mcp.server", None)
            import sabertooth_mcp.server as server_mod

    return server_mod


@pytest.fixture
def server(monkeypatch, transport_factory):
    server_mod = _get_server_module()
    opened = []

    def fake_connection(port, baud_rate=9600):
        conn = transport_factory(port, baud_rate)
        opened.append(conn)
        return conn

    monkeypatch.setattr(server_mod, "SerialConnection", fake_connection)
    server_mod.opened = opened
    return server_mod


def _frames(server):
    return [parse_frame(w) for w in server.opened[-1].writes]


def test_tools_require_connection(server):
    result = server.drive_mixed(10)
    assert result["kind"] == "transport"
    assert result["transport_kind"] == "no_device"
    assert "connect" in result["error"]


def test_connect_and_disconnect(server):
    result = server.connect("/dev/ttyUSB0", address=130)
    assert result == {
        "connected": True,
        "port": "/dev/ttyUSB0",
        "baud_rate": 9600,
        "address": 130,
    }
    assert server.connect("/dev/ttyUSB0")["message"] == "Already connected"

    assert server.disconnect() == {"disconnected": True}
    assert not server.opened[0].connected
    assert json.loads(server.resource_device_status()) == {"connected": False}


def test_connect_invalid_address_does_not_open(server):
    result = server.connect("/dev/ttyUSB0", address=300)
    assert result["kind"] == "invalid_input"
    assert json.loads(server.resource_device_status()) == {"connected": False}


def test_drive_motor(server):
    server.connect("/dev/ttyUSB0")
    assert server.drive_motor(1, 100) == {"motor": 1, "value": 100}
    assert server.drive_motor(2, -128) == {"motor": 2, "value": -128}
    m1, m2 = _frames(server)
    assert (m1.command, m1.data) == (Command.DRIVE_FORWARD_M1, 100)
    assert (m2.command, m2.data) == (Command.DRIVE_BACKWARD_M2, 127)


def test_drive_motor_bad_channel(server):
    server.connect("/dev/ttyUSB0")
    result = server.drive_motor(3, 10)
    assert result["kind"] == "invalid_input"
    assert server.opened[-1].writes == []


def test_mixed_and_stop(server):
    server.connect("/dev/ttyUSB0")
    server.drive_mixed(50)
    server.turn_mixed(-20)
    assert server.stop() == {"stopped": True}
    commands = [f.command for f in _frames(server)]
    assert commands == [
        Command.DRIVE_FORWARD_MIXED,
        Command.TURN_LEFT_MIXED,
        Command.DRIVE_FORWARD_M1,
        Command.DRIVE_FORWARD_M2,
    ]


def test_invalid_input_becomes_error_result(server):
    server.connect("/dev/ttyUSB0")
    result = server.set_serial_timeout(13000)
    assert result["kind"] == "invalid_input"
    assert "12700" in result["error"]
    assert server.opened[-1].writes == []


def test_voltage_tools_convert_volts(server):
    server.connect("/dev/ttyUSB0")
    low_result = server.set_min_voltage(12.0)
    assert (low_result["volts"], low_result["units"]) == (12.0, 64)
    assert low_result["effective_volts"] == pytest.approx(6.0 + 64 * 24 / 255)
    high_result = server.set_max_voltage(25.0)
    assert (high_result["volts"], high_result["units"]) == (25.0, 255)
    assert high_result["effective_volts"] == pytest.approx(25.0)
    low, high = _frames(server)
    assert (low.command, low.data) == (Command.MIN_VOLTAGE, 64)
    assert (high.command, high.data) == (Command.MAX_VOLTAGE, 255)


def test_set_baud_rate_updates_status(server):
    server.connect("/dev/ttyUSB0")
    assert server.set_baud_rate(115200) == {"baud_rate": 115200}
    status = json.loads(server.resource_device_status())
    assert status["baud_rate"] == 115200
    assert status["address"] == 128


def test_set_address(server):
    server.connect("/dev/ttyUSB0")
    assert server.set_address(131) == {"address": 131}
    server.set_ramping(255)
    server.set_deadband(0)
    ramp, dead = _frames(server)
    assert ramp.address == dead.address == 131
    assert (ramp.command, ramp.data) == (Command.RAMPING, 80)
    assert (dead.command, dead.data) == (Command.DEADBAND, 0)


def test_command_table_resource(server):
    table = json.loads(server.resource_command_table())
    assert {"code": 15, "name": "baud_rate"} in table["commands"]
    assert table["baud_rates"] == [2400, 9600, 19200, 38400, 115200]
    assert table["default_address"] == 128


def test_drive_safely_prompt(server):
    text = server.drive_safely("back out of the garage")
    assert "back out of the garage" in text
    assert "stop" in text
