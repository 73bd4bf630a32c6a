"""Linear range mapping between application units and device units.

The controller speaks in small integer ranges (0-127 data bytes, 0-255
configuration units, +/-2047 motor values). These helpers convert to and
from ratios and physical units without any clamping unless stated.
"""

from __future__ import annotations

from typing import Tuple, Union

from ..errors import InvalidInputError

Number = Union[int, float]
RangePair = Tuple[Number, Number]

RANGE_MAX = 2047
RANGE_MIN = -2047

# Minimum battery voltage: 0 -> 6 V, 255 -> 30 V (~0.094 V per unit)
MIN_VOLTAGE_RANGE: RangePair = (6.0, 30.0)
# Maximum supply voltage: 0 -> 0 V, 255 -> 25 V (~0.1 V per unit)
MAX_VOLTAGE_RANGE: RangePair = (0.0, 25.0)
VOLTAGE_UNITS_RANGE: RangePair = (0, 255)


def _div_toward_zero(num: int, den: int) -> int:
    quotient = abs(num) // abs(den)
    return -quotient if (num < 0) != (den < 0) else quotient


def map_range(from_range: RangePair, to_range: RangePair, value: Number) -> Number:
    """Affinely rescale ``value`` from ``from_range`` onto ``to_range``.

    When every operand is an ``int`` the division truncates toward zero and
    an ``int`` is returned; otherwise the result is a float. The result is
    not clamped to ``to_range``.

    Raises:
        InvalidInputError: If ``from_range`` has zero width.
    """
    from_low, from_high = from_range
    to_low, to_high = to_range
    span = from_high - from_low
    if span == 0:
        raise InvalidInputError(
            f"source range {from_range!r} has zero width"
        )

    scaled = (value - from_low) * (to_high - to_low)
    if all(isinstance(x, int) for x in (from_low, from_high, to_low, to_high, value)):
        return to_low + _div_toward_zero(scaled, span)
    return to_low + scaled / span


def ratio_to_value(ratio: float) -> int:
    """Convert a ratio in [-1.0, 1.0] to a motor value in [-2047, 2047].

    Raises:
        InvalidInputError: If ``ratio`` is outside [-1.0, 1.0] or NaN.
    """
    if not -1.0 <= ratio <= 1.0:
        raise InvalidInputError(f"value ({ratio}) out of range -1.0~1.0")
    value = int(ratio * RANGE_MAX)
    return max(RANGE_MIN, min(RANGE_MAX, value))


def value_to_ratio(value: int) -> float:
    """Inverse of :func:`ratio_to_value`. Out-of-range values are not clamped."""
    return value / RANGE_MAX


def _volts_to_units(volts: float, volt_range: RangePair, label: str) -> int:
    low, high = volt_range
    if not low <= volts <= high:
        raise InvalidInputError(
            f"{label} must be {low:g}-{high:g} V, got {volts}"
        )
    return round(map_range(volt_range, VOLTAGE_UNITS_RANGE, float(volts)))


def min_voltage_to_units(volts: float) -> int:
    """Convert a minimum battery voltage (6-30 V) to device units (0-255)."""
    return _volts_to_units(volts, MIN_VOLTAGE_RANGE, "minimum voltage")


def max_voltage_to_units(volts: float) -> int:
    """Convert a maximum supply voltage (0-25 V) to device units (0-255)."""
    return _volts_to_units(volts, MAX_VOLTAGE_RANGE, "maximum voltage")


def units_to_min_voltage(units: int) -> float:
    """Convert minimum voltage device units (0-255) back to volts (6-30 V)."""
    return map_range(VOLTAGE_UNITS_RANGE, MIN_VOLTAGE_RANGE, float(units))


def units_to_max_voltage(units: int) -> float:
    """Convert maximum voltage device units (0-255) back to volts (0-25 V)."""
    return map_range(VOLTAGE_UNITS_RANGE, MAX_VOLTAGE_RANGE, float(units))
