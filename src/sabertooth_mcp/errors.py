"""Error types shared by the protocol, transport, and controller layers.

Every failure raised by this package is a :class:`SabertoothError` with a
``kind`` for programmatic dispatch and a ``description`` for humans::

    SabertoothError
    ├── TransportError          (serial link failed; carries transport_kind)
    ├── InvalidInputError       (caller-supplied value out of range)
    ├── ResponseMalformedError  (device reply could not be parsed)
    └── UnknownError
"""

from __future__ import annotations

import errno
from enum import Enum

import serial


class ErrorKind(Enum):
    """Top-level error categories."""

    TRANSPORT = "transport"
    INVALID_INPUT = "invalid_input"
    RESPONSE = "response"
    UNKNOWN = "unknown"


class TransportErrorKind(Enum):
    """Sub-kinds reported by the serial transport."""

    NO_DEVICE = "no_device"
    INVALID_INPUT = "invalid_input"
    TIMED_OUT = "timed_out"
    IO = "io"
    UNKNOWN = "unknown"


_NO_DEVICE_ERRNOS = {errno.ENOENT, errno.ENODEV, errno.ENXIO}


class SabertoothError(Exception):
    """Base class for all errors raised by this package."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    def __str__(self) -> str:
        return self._description


class TransportError(SabertoothError):
    """The underlying serial link failed.

    ``transport_kind`` preserves the transport's own classification of the
    failure, and the original exception (if any) is available as
    ``source`` and is chained as ``__cause__`` when raised with ``from``.
    """

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        transport_kind: TransportErrorKind,
        description: str,
        source: BaseException | None = None,
    ) -> None:
        super().__init__(description)
        self._transport_kind = transport_kind
        self._source = source

    @property
    def transport_kind(self) -> TransportErrorKind:
        return self._transport_kind

    @property
    def source(self) -> BaseException | None:
        return self._source

    @classmethod
    def from_exception(cls, exc: BaseException) -> TransportError:
        """Wrap a pyserial or OS-level exception, classifying its sub-kind."""
        if isinstance(exc, TransportError):
            return exc
        return cls(_classify(exc), str(exc) or type(exc).__name__, source=exc)


class InvalidInputError(SabertoothError, ValueError):
    """A caller-supplied value or range was rejected before anything was sent."""

    kind = ErrorKind.INVALID_INPUT


class ResponseMalformedError(SabertoothError):
    """A device response could not be parsed.

    Never raised when sending commands; only when decoding a captured
    byte stream with :func:`~sabertooth_mcp.protocol.framing.split_frames`.
    """

    kind = ErrorKind.RESPONSE


class UnknownError(SabertoothError):
    kind = ErrorKind.UNKNOWN


def _classify(exc: BaseException) -> TransportErrorKind:
    if isinstance(exc, (serial.SerialTimeoutException, TimeoutError)):
        return TransportErrorKind.TIMED_OUT
    if isinstance(exc, ValueError):
        return TransportErrorKind.INVALID_INPUT
    # pyserial re-raises open() failures as SerialException(errno, msg)
    code = getattr(exc, "errno", None)
    if code is None and exc.args and isinstance(exc.args[0], int):
        code = exc.args[0]
    if isinstance(exc, FileNotFoundError) or code in _NO_DEVICE_ERRNOS:
        return TransportErrorKind.NO_DEVICE
    if isinstance(exc, OSError):
        return TransportErrorKind.IO
    return TransportErrorKind.UNKNOWN
