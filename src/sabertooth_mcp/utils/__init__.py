"""Pure helpers: frame checksum and numeric range mapping."""

from .checksum import checksum
from .mapping import RANGE_MAX, RANGE_MIN, map_range, ratio_to_value, value_to_ratio
