"""MpvSocket - client for mpv's JSON IPC.

Commands are synchronous: the request is written, then lines are read
until the reply carrying the same request id arrives. Lines that are not
that reply (including events) are discarded while waiting. Subscriptions
read events from the same stream, so a command must not be issued while
a subscription is being iterated.

Official documentation: https://mpv.io/manual/master/#json-ipc
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from mpv_socket.core.errors import MpvConnectionError, SocketClosedError
from mpv_socket.core.event import PropertyChangeEvent
from mpv_socket.core.property import Property
from mpv_socket.core.protocol import Command, CommandResponse, Request
from mpv_socket.core.value import Value, as_int, as_str, as_value
from mpv_socket.subscription import PropertySubscription
from mpv_socket.transport.channel import CONNECT_ATTEMPTS, RETRY_DELAY, Channel, open_channel

if TYPE_CHECKING:
    from mpv_socket.config import SocketConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INT64_MIN = -(2**63)
_INT64_SPAN = 2**64


class RequestId:
    """Signed 64-bit request id counter, wrapping on overflow."""

    def __init__(self, start: int = 0):
        self.last = start

    def next(self) -> int:
        return self.advance(1)

    def advance(self, num: int) -> int:
        self.last = (self.last + num - _INT64_MIN) % _INT64_SPAN + _INT64_MIN
        return self.last


class MpvSocket:
    """Connection to a running mpv instance.

    Example:
        >>> with MpvSocket.connect("/tmp/mpv-socket") as mpv:
        ...     print(mpv.client_name())
        ...     mpv.set_property(Property.PAUSE, False)
        ...     with mpv.observe_property(Property.PLAYBACK_TIME, as_float) as times:
        ...         for playback_time in times:
        ...             print(playback_time)
    """

    def __init__(self, channel: Channel):
        self._channel = channel
        self._last_request_id = RequestId()
        self._closed = False

    @classmethod
    def connect(
        cls,
        path: str | os.PathLike[str],
        attempts: int = CONNECT_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
    ) -> MpvSocket:
        """Open the mpv socket or named pipe at path.

        Raises:
            MpvConnectionError: If the channel cannot be opened.
        """
        return cls(open_channel(path, attempts=attempts, retry_delay=retry_delay))

    @classmethod
    def from_config(cls, config: SocketConfig) -> MpvSocket:
        return cls.connect(config.path, attempts=config.connect_attempts, retry_delay=config.retry_delay)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the channel. The connection cannot be used afterwards."""
        self._closed = True
        self._channel.close()

    def __enter__(self) -> MpvSocket:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def client_name(self) -> str:
        """Return the name of the client, the string "ipc-N"."""
        return as_str(self.send_recv(Command.client_name()))

    def get_time_us(self) -> int:
        """Return mpv's internal time in microseconds (arbitrary offset)."""
        return as_int(self.send_recv(Command.get_time_us()))

    def get_version(self) -> int:
        """Return the client API version mpv implements."""
        return as_int(self.send_recv(Command.get_version()))

    def get_property(self, prop: Property | str, convert: Callable[[Value], T] = as_value) -> T:  # type: ignore[assignment]
        """Return the value of a property.

        Args:
            prop: Property to read.
            convert: Typed accessor applied to the value (e.g. as_float).

        Raises:
            MpvCommandError: E.g. "property unavailable".
            ValueTypeError: If convert rejects the value.
        """
        return convert(self.send_recv(Command.get_property(prop)))

    def set_property(self, prop: Property | str, value: Any) -> Value:
        """Set a property to the given value."""
        return self.send_recv(Command.set_property(prop, value))

    def request_log_messages(self, level: str) -> Value:
        """Enable log-message events of at least the given level ("no" disables)."""
        return self.send_recv(Command.request_log_messages(level))

    def observe_property(
        self,
        prop: Property | str,
        convert: Callable[[Value], T] = as_value,  # type: ignore[assignment]
    ) -> PropertySubscription[T]:
        """Watch a single property for changes.

        Iterating the returned subscription yields each new value, passed
        through convert. Changes to an absent value are skipped.
        """
        observer_ids = self._observe([prop])
        return PropertySubscription(self, observer_ids, lambda event: convert(event.data))

    def observe_properties(
        self, properties: Iterable[Property | str]
    ) -> PropertySubscription[PropertyChangeEvent]:
        """Watch several properties for changes.

        Observer ids are assigned 1, 2, 3, ... in the given order. If
        observing one property fails the error is raised; properties
        observed before it stay observed on the mpv side.

        Returns:
            Subscription yielding PropertyChangeEvent items. Close it (or
            use it as a context manager) to unobserve the properties.
        """
        return PropertySubscription(self, self._observe(properties), lambda event: event)

    def _observe(self, properties: Iterable[Property | str]) -> list[int]:
        observer_ids: list[int] = []
        for observer_id, prop in enumerate(properties, start=1):
            self.send_recv(Command.observe_property(observer_id, prop))
            observer_ids.append(observer_id)
        return observer_ids

    def send_recv(self, command: Command) -> Value:
        """Send a command and wait for its reply.

        Returns:
            The reply data (None if the reply has no data).

        Raises:
            SocketClosedError: If the connection is closed.
            MpvConnectionError: If the channel fails.
            MpvCommandError: If mpv answered with an error.
            ProtocolError: If a received line is malformed.
        """
        if self._closed:
            raise SocketClosedError("mpv socket is closed")

        request = Request(command=command, request_id=self._last_request_id.next())
        data = request.encode()
        logger.debug("sending: %s", data.decode().rstrip())

        try:
            self._channel.write(data)
            self._channel.flush()
        except OSError as e:
            self.mark_closed("write failed")
            raise MpvConnectionError(f"failed to send to mpv: {e}") from e

        while True:
            line = self.read_line()
            if not line:
                self.mark_closed("end of stream")
                raise SocketClosedError("mpv closed the socket while a reply was pending")

            response = CommandResponse.parse(line)
            if response.request_id == request.request_id:
                return response.result()

    def read_line(self) -> bytes:
        """Read one raw line from mpv. b"" means mpv closed the channel.

        Raises:
            MpvConnectionError: If the read fails.
        """
        try:
            line = self._channel.readline()
        except OSError as e:
            self.mark_closed("read failed")
            raise MpvConnectionError(f"failed to read from mpv: {e}") from e
        if line:
            logger.debug("received: %s", line.decode("utf-8", errors="replace").rstrip())
        return line

    def mark_closed(self, reason: str) -> None:
        """Permanently mark the connection closed without closing the channel."""
        if not self._closed:
            logger.debug("mpv socket closed: %s", reason)
        self._closed = True
