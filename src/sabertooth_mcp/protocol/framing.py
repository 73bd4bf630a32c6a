"""Frame builder and parser for packet serial commands.

Frame layout::

    +---------+---------+--------+----------+
    | Address | Command |  Data  | Checksum |
    | 1 byte  | 1 byte  | 1 byte |  1 byte  |
    +---------+---------+--------+----------+

- Address: device address, 128 by default
- Command: command code 0-17
- Data: command argument
- Checksum: (address + command + data) & 0x7F

There are no delimiters and no length field; every frame is 4 bytes.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidInputError, ResponseMalformedError
from ..utils.checksum import checksum

FRAME_SIZE = 4


@dataclass(frozen=True)
class Frame:
    """A single packet serial command frame."""

    address: int
    command: int
    data: int

    @property
    def checksum(self) -> int:
        return checksum((self.address, self.command, self.data))

    def to_bytes(self) -> bytes:
        return bytes([self.address, self.command, self.data, self.checksum])

    def __repr__(self) -> str:
        return (
            f"Frame(address={self.address}, command={self.command}, "
            f"data={self.data}, checksum=0x{self.checksum:02X})"
        )


def build_frame(address: int, command: int, data: int) -> bytes:
    """Build the 4 wire bytes for one command.

    Args:
        address: Device address 0-255.
        command: Command code.
        data: Data byte 0-255.

    Returns:
        A 4-byte ``bytes`` object ready to write to the serial port.
    """
    for name, value in (("address", address), ("command", command), ("data", data)):
        if not 0 <= value <= 0xFF:
            raise InvalidInputError(f"{name} must be 0-255, got {value}")
    return Frame(address, command, data).to_bytes()


def parse_frame(data: bytes) -> Frame | None:
    """Parse 4 wire bytes back into a Frame.

    Useful for inspecting what was written, e.g. on a loopback port.

    Returns:
        A ``Frame``, or ``None`` if the length or checksum is wrong.
    """
    if len(data) != FRAME_SIZE:
        return None

    address, command, value, received = data
    if checksum((address, command, value)) != received:
        return None

    return Frame(address=address, command=command, data=value)


def split_frames(stream: bytes) -> list[Frame]:
    """Split a captured byte stream into consecutive frames.

    Trailing bytes that do not fill a whole frame are ignored. Raises
    ``ResponseMalformedError`` if any complete frame fails its checksum.
    """
    frames: list[Frame] = []
    for offset in range(0, len(stream) - FRAME_SIZE + 1, FRAME_SIZE):
        chunk = stream[offset : offset + FRAME_SIZE]
        frame = parse_frame(chunk)
        if frame is None:
            raise ResponseMalformedError(f"Bad frame at offset {offset}: {chunk.hex(' ')}")
        frames.append(frame)
    return frames
