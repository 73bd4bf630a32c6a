"""Command surface of the Sabertooth 2x60.

Each wire protocol (packet serial, plain text) provides its own
implementation; callers pick one at construction and program against
this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Sabertooth2x60(ABC):
    """Methods available for controlling a Sabertooth 2x60."""

    @abstractmethod
    def set_min_voltage(self, units: int) -> None:
        """Set the battery cutoff voltage.

        If the battery drops below this value the outputs shut down. The
        value is cleared at startup, so it must be set on every run. Each
        unit is ~0.094 V, 0 is 6 V and 255 is 30 V.
        """

    @abstractmethod
    def set_max_voltage(self, units: int) -> None:
        """Set the regeneration limit for supplies that cannot sink current.

        Above this voltage the driver hard-brakes the motors until the
        input voltage falls again. Each unit is ~0.1 V, 0 is 0 V and 255 is
        25 V. Leave at the default when running from a battery.
        """

    @abstractmethod
    def set_serial_timeout(self, ms: int) -> None:
        """Stop the motors if no command arrives within ``ms`` milliseconds.

        Off by default, resolution 100 ms, maximum 12700 ms. Does not
        persist through a power cycle.
        """

    @abstractmethod
    def set_baud_rate(self, baud_rate: int) -> None:
        """Change the device baud rate, then the local port's to match.

        Valid rates are 2400, 9600 (default), 19200, 38400 and 115200. The
        setting persists through a power cycle.
        """

    @abstractmethod
    def set_ramping(self, rate: int) -> None:
        """Adjust acceleration ramping in all modes. Lower is faster."""

    @abstractmethod
    def set_deadband(self, deadband: int) -> None:
        """Set the range of commands around stop that are treated as stop."""

    @abstractmethod
    def drive_m1(self, value: int) -> None:
        """Drive motor 1. -128 is full reverse, 127 full forward."""

    @abstractmethod
    def drive_m2(self, value: int) -> None:
        """Drive motor 2. -128 is full reverse, 127 full forward."""

    @abstractmethod
    def drive_mixed(self, value: int) -> None:
        """Drive both motors in mixed mode. -128 is full reverse, 127 full forward."""

    @abstractmethod
    def turn_mixed(self, value: int) -> None:
        """Turn in mixed mode. -128 is full left, 127 full right."""

    def stop(self) -> None:
        """Bring both motors to zero."""
        self.drive_m1(0)
        self.drive_m2(0)
