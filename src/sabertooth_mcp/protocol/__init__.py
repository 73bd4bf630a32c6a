"""Protocol layer: packet serial framing, checksums, and command builders."""

from .framing import Frame, build_frame, parse_frame
from .commands import Command, DEFAULT_ADDRESS, build_command
