"""Command codes and high-level command builders.

Each builder validates its argument, maps it to the device's data byte
and returns a complete 4-byte frame for the given address.
"""

from __future__ import annotations

from enum import IntEnum

from ..errors import InvalidInputError
from ..utils.mapping import map_range
from .framing import build_frame

DEFAULT_ADDRESS = 128
MAX_SERIAL_TIMEOUT_MS = 12700
MAX_MOTOR_DATA = 127


class Command(IntEnum):
    """Packet serial command codes."""

    DRIVE_FORWARD_M1 = 0
    DRIVE_BACKWARD_M1 = 1
    MIN_VOLTAGE = 2
    MAX_VOLTAGE = 3
    DRIVE_FORWARD_M2 = 4
    DRIVE_BACKWARD_M2 = 5
    DRIVE_FORWARD_MIXED = 8
    DRIVE_BACKWARD_MIXED = 9
    TURN_RIGHT_MIXED = 10
    TURN_LEFT_MIXED = 11
    SERIAL_TIMEOUT = 14
    BAUD_RATE = 15
    RAMPING = 16
    DEADBAND = 17


# Baud rate -> data byte for the BAUD_RATE command
BAUD_RATE_CODES: dict[int, int] = {
    2400: 1,
    9600: 2,
    19200: 3,
    38400: 4,
    115200: 5,
}

# (forward, backward) command pairs for signed motor values
MOTOR_COMMANDS: dict[str, tuple[Command, Command]] = {
    "m1": (Command.DRIVE_FORWARD_M1, Command.DRIVE_BACKWARD_M1),
    "m2": (Command.DRIVE_FORWARD_M2, Command.DRIVE_BACKWARD_M2),
    "drive": (Command.DRIVE_FORWARD_MIXED, Command.DRIVE_BACKWARD_MIXED),
    "turn": (Command.TURN_RIGHT_MIXED, Command.TURN_LEFT_MIXED),
}


def check_int_range(name: str, value: int, low: int, high: int) -> int:
    """Reject non-integers and integers outside [low, high]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    if not low <= value <= high:
        raise InvalidInputError(f"{name} must be {low}-{high}, got {value}")
    return value


def build_command(address: int, command: Command, data: int) -> bytes:
    """Build a single frame for a command."""
    return build_frame(address, command.value, data)


def encode_motor_value(value: int) -> tuple[bool, int]:
    """Split a signed motor value into (forward, data byte).

    The magnitude is clamped to 127 so that -128 is sent as 127.
    """
    check_int_range("motor value", value, -128, 127)
    if value >= 0:
        return True, min(MAX_MOTOR_DATA, value)
    return False, -max(-MAX_MOTOR_DATA, value)


def build_motor_command(
    address: int, forward: Command, backward: Command, value: int
) -> bytes:
    """Build a drive/turn frame, choosing the command code by sign.

    Args:
        address: Device address.
        forward: Command used for values >= 0.
        backward: Command used for values < 0.
        value: Motor value -128 (full reverse) to 127 (full forward).
    """
    is_forward, data = encode_motor_value(value)
    return build_command(address, forward if is_forward else backward, data)


def build_drive_m1(address: int, value: int) -> bytes:
    return build_motor_command(address, *MOTOR_COMMANDS["m1"], value)


def build_drive_m2(address: int, value: int) -> bytes:
    return build_motor_command(address, *MOTOR_COMMANDS["m2"], value)


def build_drive_mixed(address: int, value: int) -> bytes:
    return build_motor_command(address, *MOTOR_COMMANDS["drive"], value)


def build_turn_mixed(address: int, value: int) -> bytes:
    """Build a mixed-mode turn frame. -128 is full left, 127 full right."""
    return build_motor_command(address, *MOTOR_COMMANDS["turn"], value)


def build_set_min_voltage(address: int, units: int) -> bytes:
    """Build a minimum battery voltage frame.

    Args:
        units: 0-255, where 0 is 6 V and 255 is 30 V.
    """
    check_int_range("minimum voltage", units, 0, 255)
    return build_command(address, Command.MIN_VOLTAGE, units)


def build_set_max_voltage(address: int, units: int) -> bytes:
    """Build a maximum supply voltage frame.

    Args:
        units: 0-255, where 0 is 0 V and 255 is 25 V.
    """
    check_int_range("maximum voltage", units, 0, 255)
    return build_command(address, Command.MAX_VOLTAGE, units)


def serial_timeout_data(ms: int) -> int:
    """Map a timeout in milliseconds to the SERIAL_TIMEOUT data byte.

    The device counts in 100 ms steps. Anything from 1 to 99 ms rounds up
    to one step so a small non-zero timeout never disables the feature;
    everything else rounds down.
    """
    check_int_range("timeout", ms, 0, MAX_SERIAL_TIMEOUT_MS)
    rounded_ms = 100 if 0 < ms < 100 else ms // 100 * 100
    return map_range((0, MAX_SERIAL_TIMEOUT_MS), (0, 127), rounded_ms)


def build_set_serial_timeout(address: int, ms: int) -> bytes:
    """Build a serial timeout frame. 0 disables the timeout."""
    return build_command(address, Command.SERIAL_TIMEOUT, serial_timeout_data(ms))


def baud_rate_code(baud_rate: int) -> int:
    if isinstance(baud_rate, bool) or not isinstance(baud_rate, int):
        raise InvalidInputError(
            f"baud rate must be an integer, got {type(baud_rate).__name__}"
        )
    try:
        return BAUD_RATE_CODES[baud_rate]
    except KeyError:
        raise InvalidInputError(
            f"invalid baud rate {baud_rate!r}. Valid: {sorted(BAUD_RATE_CODES)}"
        ) from None


def build_set_baud_rate(address: int, baud_rate: int) -> bytes:
    """Build a baud rate frame. The setting persists through a power cycle."""
    return build_command(address, Command.BAUD_RATE, baud_rate_code(baud_rate))


def build_set_ramping(address: int, rate: int) -> bytes:
    """Build a ramping frame. Lower values mean faster ramping.

    Args:
        rate: 0-255, mapped onto the device's 0-80 range.
    """
    check_int_range("ramping", rate, 0, 255)
    return build_command(address, Command.RAMPING, map_range((0, 255), (0, 80), rate))


def build_set_deadband(address: int, deadband: int) -> bytes:
    """Build a deadband frame.

    Args:
        deadband: 0-255, mapped onto the device's 0-127 range.
    """
    check_int_range("deadband", deadband, 0, 255)
    return build_command(
        address, Command.DEADBAND, map_range((0, 255), (0, 127), deadband)
    )
