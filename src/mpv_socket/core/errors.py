"""mpv socket error types.

Custom exceptions for connection failures, protocol errors and
remote command errors.
"""

from __future__ import annotations

from typing import Any


class MpvSocketError(Exception):
    """Base error for all mpv socket operations."""


class MpvConnectionError(MpvSocketError):
    """Error opening or communicating over the mpv channel.

    Raised when:
    - The socket or pipe cannot be opened
    - The pipe stayed busy for every connection attempt
    - A read or write on an open channel fails

    The underlying ``OSError`` is chained as ``__cause__``.
    """


class SocketClosedError(MpvSocketError):
    """Operation attempted on a connection that is already closed.

    A connection closes after a shutdown event, an end-file event with
    reason "quit", a zero-length read, or an I/O failure.
    """


class ProtocolError(MpvSocketError):
    """A line received from mpv could not be understood.

    Raised for invalid JSON, wrong field types, and replies that carry
    neither a recognized error string nor data.
    """


class MpvCommandError(MpvSocketError):
    """mpv answered a command with an error string other than "success"."""

    def __init__(self, error: str):
        super().__init__(f"mpv error response: {error}")
        self.error = error


class ValueTypeError(MpvSocketError, TypeError):
    """A value did not have the shape a typed accessor expected."""

    def __init__(self, expected: str, actual: str, value: Any):
        super().__init__(f"expected {expected}, but got {actual}: {value!r}")
        self.expected = expected
        self.actual = actual
        self.value = value
