"""7-bit additive checksum used by packet serial frames."""

from __future__ import annotations

from typing import Iterable

CHECKSUM_MASK = 0x7F


def checksum(data: Iterable[int]) -> int:
    """Sum all bytes and keep the low 7 bits.

    Computed over the address, command and data bytes of a frame, never
    over the checksum byte itself.
    """
    return sum(data) & CHECKSUM_MASK
