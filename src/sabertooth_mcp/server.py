"""MCP server entry point for the Sabertooth 2x60.

Exposes the packet serial command surface as tools, plus connection
status and protocol reference resources, via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP

from .controller.packet_serial import PacketSerial
from .errors import SabertoothError, TransportError, TransportErrorKind
from .protocol.commands import (
    BAUD_RATE_CODES,
    DEFAULT_ADDRESS,
    MAX_SERIAL_TIMEOUT_MS,
    Command,
)
from .transport.serial_connection import DEFAULT_BAUD_RATE, SerialConnection
from .utils.mapping import (
    max_voltage_to_units,
    min_voltage_to_units,
    units_to_max_voltage,
    units_to_min_voltage,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "sabertooth-2x60",
    instructions="MCP server for the Sabertooth 2x60 dual motor driver (packet serial)",
)

# Global connection state
_connection: SerialConnection | None = None
_controller: PacketSerial | None = None


def _get_controller() -> PacketSerial:
    """Get the active controller, raising if not connected."""
    if _controller is None or _connection is None or not _connection.connected:
        raise TransportError(
            TransportErrorKind.NO_DEVICE,
            "Not connected to device. Use the 'connect' tool first.",
        )
    return _controller


def _reports_errors(fn: Callable[..., dict[str, Any]]) -> Callable[..., dict[str, Any]]:
    """Turn library errors into an error result instead of a failed call."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs) -> dict[str, Any]:
        try:
            return fn(*args, **kwargs)
        except SabertoothError as e:
            logger.warning("%s failed: %s", fn.__name__, e)
            result: dict[str, Any] = {"error": e.description, "kind": e.kind.value}
            if isinstance(e, TransportError):
                result["transport_kind"] = e.transport_kind.value
            return result

    return wrapper


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
@_reports_errors
def connect(
    port: str,
    baud_rate: int = DEFAULT_BAUD_RATE,
    address: int = DEFAULT_ADDRESS,
) -> dict[str, Any]:
    """Open the serial port to a Sabertooth 2x60 in packet serial mode.

    Args:
        port: Serial device (e.g. /dev/ttyUSB0, COM3) or pyserial URL.
        baud_rate: Current baud rate of the driver (default 9600).
        address: Packet serial address set by the DIP switches (default 128).
    """
    global _connection, _controller
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "port": _connection.port,
        }

    connection = SerialConnection(port, baud_rate=baud_rate)
    controller = PacketSerial(connection, address=address)
    connection.open()
    _connection, _controller = connection, controller

    return {
        "connected": True,
        "port": port,
        "baud_rate": baud_rate,
        "address": address,
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the serial port."""
    global _connection, _controller
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    _controller = None
    return {"disconnected": True}


@mcp.tool()
@_reports_errors
def set_address(address: int) -> dict[str, Any]:
    """Address a different driver on the same serial line.

    Args:
        address: Packet serial address (128-135 on stock DIP settings).
    """
    controller = _get_controller()
    controller.address = address
    return {"address": controller.address}


# ─── MOTION TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
@_reports_errors
def drive_motor(motor: int, value: int) -> dict[str, Any]:
    """Drive a single motor in independent mode.

    Args:
        motor: Motor channel, 1 or 2.
        value: -128 (full reverse) to 127 (full forward), 0 stops.
    """
    controller = _get_controller()
    if motor == 1:
        controller.drive_m1(value)
    elif motor == 2:
        controller.drive_m2(value)
    else:
        return {"error": f"motor should be 1 or 2 (was {motor})", "kind": "invalid_input"}
    return {"motor": motor, "value": value}


@mcp.tool()
@_reports_errors
def drive_mixed(value: int) -> dict[str, Any]:
    """Drive forward/backward in mixed (differential) mode.

    Args:
        value: -128 (full reverse) to 127 (full forward).
    """
    _get_controller().drive_mixed(value)
    return {"drive": value}


@mcp.tool()
@_reports_errors
def turn_mixed(value: int) -> dict[str, Any]:
    """Turn in mixed (differential) mode.

    Args:
        value: -128 (full left) to 127 (full right).
    """
    _get_controller().turn_mixed(value)
    return {"turn": value}


@mcp.tool()
@_reports_errors
def stop() -> dict[str, Any]:
    """Stop both motors."""
    _get_controller().stop()
    return {"stopped": True}


# ─── CONFIGURATION TOOLS ──────────────────────────────────────────────

@mcp.tool()
@_reports_errors
def set_min_voltage(volts: float) -> dict[str, Any]:
    """Set the low-battery cutoff. Must be resent after every power-up.

    Args:
        volts: Cutoff voltage, 6.0-30.0 V.
    """
    units = min_voltage_to_units(volts)
    _get_controller().set_min_voltage(units)
    return {"volts": volts, "units": units, "effective_volts": units_to_min_voltage(units)}


@mcp.tool()
@_reports_errors
def set_max_voltage(volts: float) -> dict[str, Any]:
    """Set the regenerative braking limit for power supplies.

    Args:
        volts: Limit voltage, 0.0-25.0 V.
    """
    units = max_voltage_to_units(volts)
    _get_controller().set_max_voltage(units)
    return {"volts": volts, "units": units, "effective_volts": units_to_max_voltage(units)}


@mcp.tool()
@_reports_errors
def set_serial_timeout(ms: int) -> dict[str, Any]:
    """Stop the motors when no command is received within the timeout.

    Args:
        ms: Timeout in milliseconds, 0 (disabled) to 12700, 100 ms steps.
    """
    _get_controller().set_serial_timeout(ms)
    return {"timeout_ms": ms}


@mcp.tool()
@_reports_errors
def set_baud_rate(baud_rate: int) -> dict[str, Any]:
    """Change the driver's baud rate and switch the open port to match.

    Args:
        baud_rate: One of 2400, 9600, 19200, 38400, 115200.
    """
    _get_controller().set_baud_rate(baud_rate)
    return {"baud_rate": baud_rate}


@mcp.tool()
@_reports_errors
def set_ramping(rate: int) -> dict[str, Any]:
    """Set acceleration ramping. Lower values ramp faster.

    Args:
        rate: 0-255.
    """
    _get_controller().set_ramping(rate)
    return {"ramping": rate}


@mcp.tool()
@_reports_errors
def set_deadband(deadband: int) -> dict[str, Any]:
    """Set the deadband around stop.

    Args:
        deadband: 0-255.
    """
    _get_controller().set_deadband(deadband)
    return {"deadband": deadband}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("sabertooth://device/status")
def resource_device_status() -> str:
    """Connection state, port, baud rate and address."""
    if _connection is None or not _connection.connected:
        return json.dumps({"connected": False})

    return json.dumps({
        "connected": True,
        "port": _connection.port,
        "baud_rate": _connection.baud_rate,
        "address": _controller.address if _controller else None,
    })


@mcp.resource("sabertooth://protocol/commands")
def resource_command_table() -> str:
    """Packet serial command codes and valid settings."""
    return json.dumps({
        "commands": [{"code": c.value, "name": c.name.lower()} for c in Command],
        "baud_rates": sorted(BAUD_RATE_CODES),
        "max_serial_timeout_ms": MAX_SERIAL_TIMEOUT_MS,
        "default_address": DEFAULT_ADDRESS,
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def drive_safely(task: str) -> str:
    """Guide the AI through a cautious motion sequence.

    Args:
        task: What the vehicle should do.
    """
    return f"""Plan and execute: {task}

Before moving:
- Set a serial timeout (e.g. 500 ms) so the motors stop if commands cease
- Set the minimum battery voltage for the pack in use
- Start with small values (|value| <= 30) and increase gradually

While moving:
- Prefer drive_mixed / turn_mixed for differential-drive vehicles
- Call stop as soon as the task is done or anything looks wrong

Value range is -128 to 127; 0 stops."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
