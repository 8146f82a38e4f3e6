"""Duplex byte channel to the mpv process.

On Windows mpv listens on a named pipe (``\\\\.\\pipe\\mpv-socket``), elsewhere
on a Unix domain socket (``--input-ipc-server=/tmp/mpv-socket``). Either
way the result is a buffered reader/writer pair speaking newline-delimited
JSON.

A named pipe can only be opened by one client at a time, so opening it
right after another client closed it spuriously fails with "pipe busy".
:func:`open_channel` retries that condition a few times before giving up.
"""

from __future__ import annotations

import errno
import io
import logging
import os
import socket
import time
from typing import Protocol, runtime_checkable

from mpv_socket.core.errors import MpvConnectionError

if os.name == "nt":
    import _winapi

logger = logging.getLogger(__name__)

CONNECT_ATTEMPTS = 5
RETRY_DELAY = 0.01  # seconds

# All pipe instances are busy.
ERROR_PIPE_BUSY = 231
# The pipe has been ended.
ERROR_BROKEN_PIPE = 109
# The pipe is being closed.
ERROR_NO_DATA = 232

_WINDOWS = os.name == "nt"


@runtime_checkable
class Channel(Protocol):
    """What the client needs from a channel.

    Any object with these methods can back an ``MpvSocket``.
    """

    def readline(self) -> bytes:
        """Read up to and including the next newline. b"" at end of stream."""
        ...

    def write(self, data: bytes) -> int | None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class StreamChannel:
    """Buffered channel over a socket or pipe file object."""

    def __init__(self, stream: io.BufferedRWPair, sock: socket.socket | None = None):
        self._stream = stream
        self._sock = sock

    def readline(self) -> bytes:
        return self._stream.readline()

    def write(self, data: bytes) -> int | None:
        return self._stream.write(data)

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            if self._sock is not None:
                self._sock.close()


class PipeIO(io.RawIOBase):
    """Raw I/O on a Windows named pipe handle.

    Reads and writes go through the Win32 API directly, so a failure keeps
    its ``winerror`` (the C runtime would report most pipe errors as EINVAL).
    """

    def __init__(self, handle: int):
        self._handle = handle

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        try:
            data, _ = _winapi.ReadFile(self._handle, len(buffer))
        except OSError as e:
            # mpv closed its end
            if getattr(e, "winerror", None) == ERROR_BROKEN_PIPE:
                return 0
            raise
        buffer[: len(data)] = data
        return len(data)

    def write(self, data) -> int:
        written, _ = _winapi.WriteFile(self._handle, bytes(data))
        return written

    def close(self) -> None:
        if self.closed:
            return
        try:
            _winapi.CloseHandle(self._handle)
        finally:
            super().close()


def is_busy_error(error: OSError) -> bool:
    """Whether the error is the transient "channel busy" condition."""
    if getattr(error, "winerror", None) == ERROR_PIPE_BUSY:
        return True
    return error.errno in (errno.EAGAIN, errno.EBUSY)


def is_closing_error(error: BaseException | None) -> bool:
    """Whether the error means mpv is closing (or has closed) its end."""
    if not isinstance(error, OSError):
        return False
    if getattr(error, "winerror", None) in (ERROR_NO_DATA, ERROR_BROKEN_PIPE):
        return True
    return error.errno in (errno.EPIPE, errno.ECONNRESET)


def _open_pipe(path: str) -> StreamChannel:
    handle = _winapi.CreateFile(
        path,
        _winapi.GENERIC_READ | _winapi.GENERIC_WRITE,
        0,
        _winapi.NULL,
        _winapi.OPEN_EXISTING,
        0,
        _winapi.NULL,
    )
    raw = PipeIO(handle)
    return StreamChannel(io.BufferedRWPair(raw, raw))


def _open_once(path: str) -> StreamChannel:
    if _WINDOWS:
        return _open_pipe(path)

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(path)
    except OSError:
        sock.close()
        raise
    return StreamChannel(sock.makefile("rwb"), sock)


def open_channel(
    path: str | os.PathLike[str],
    attempts: int = CONNECT_ATTEMPTS,
    retry_delay: float = RETRY_DELAY,
) -> StreamChannel:
    """Open the channel at path, retrying while it is busy.

    Args:
        path: Named pipe or Unix socket path.
        attempts: Total number of attempts while the channel is busy.
        retry_delay: Seconds to sleep between attempts.

    Returns:
        Open channel.

    Raises:
        MpvConnectionError: On any other error, or when every attempt
            found the channel busy.
    """
    path = os.fspath(path)
    logger.info("connecting to: %s", path)

    tries_left = max(attempts, 1)
    while True:
        try:
            return _open_once(path)
        except OSError as e:
            tries_left -= 1
            if is_busy_error(e) and tries_left > 0:
                logger.debug("mpv socket busy, retrying (%d attempts left)", tries_left)
                time.sleep(retry_delay)
                continue
            raise MpvConnectionError(f"failed to open mpv socket: {e}") from e
