"""Property subscriptions.

A subscription is a single-pass iterator over property changes read from
the connection's event stream. Observed properties are unobserved exactly
once when the subscription ends: when the stream is exhausted, when
``close()`` is called, or when its ``with`` block exits.

Example:
    >>> with mpv.observe_properties([Property.PAUSE, Property.VOLUME]) as changes:
    ...     for change in changes:
    ...         print(change.name, change.data)
    ...         if change.name is Property.PAUSE and change.data:
    ...             break
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from mpv_socket.core.errors import MpvCommandError, MpvSocketError, SocketClosedError
from mpv_socket.core.event import EndFileEvent, EndFileReason, EventKind, PropertyChangeEvent
from mpv_socket.core.protocol import SUCCESS, Command, EventResponse
from mpv_socket.transport.channel import is_closing_error

if TYPE_CHECKING:
    from mpv_socket.client import MpvSocket

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PropertySubscription(Generic[T]):
    """Iterator over changes of observed properties.

    A malformed line or an event carrying an mpv error makes that pull
    raise (ProtocolError, MpvCommandError, or ValueTypeError from the
    item conversion); iteration can continue afterwards. The stream ends
    when mpv shuts down, quits playback, or closes the channel.
    """

    def __init__(
        self,
        mpv: MpvSocket,
        observer_ids: list[int],
        convert: Callable[[PropertyChangeEvent], T],
    ):
        self._mpv = mpv
        self._observer_ids = list(observer_ids)
        self._convert = convert
        self._finished = False

    @property
    def observer_ids(self) -> list[int]:
        return list(self._observer_ids)

    @property
    def finished(self) -> bool:
        return self._finished

    def __iter__(self) -> PropertySubscription[T]:
        return self

    def __next__(self) -> T:
        if self._finished:
            raise StopIteration
        change = self._next_change()
        if change is None:
            self.close()
            raise StopIteration
        return self._convert(change)

    def __enter__(self) -> PropertySubscription[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _next_change(self) -> PropertyChangeEvent | None:
        """Read events until a change for one of our observers arrives.

        Returns None at end of stream.
        """
        while True:
            if self._mpv.closed:
                return None

            line = self._mpv.read_line()
            if not line:
                self._mpv.mark_closed("end of stream")
                return None

            response = EventResponse.parse(line)
            kind = response.kind

            if kind is EventKind.SHUTDOWN:
                self._mpv.mark_closed("shutdown event")
            elif kind is EventKind.END_FILE:
                end_file = response.data
                if isinstance(end_file, EndFileEvent) and end_file.reason is EndFileReason.QUIT:
                    self._mpv.mark_closed("end-file with reason quit")

            if response.error is not None and response.error != SUCCESS:
                raise MpvCommandError(response.error)

            change = response.data
            if (
                isinstance(change, PropertyChangeEvent)
                and change.id in self._observer_ids
                and change.data is not None
            ):
                return change

            logger.debug("filtered event: %s", response)

    def close(self) -> None:
        """Unobserve the properties. Safe to call more than once.

        Never raises: failures are logged. A failure because mpv closed or
        is closing its end (end of stream, broken pipe, connection reset)
        is only logged at debug level.
        """
        if self._finished:
            return
        self._finished = True

        if self._mpv.closed:
            return

        for observer_id in self._observer_ids:
            try:
                self._mpv.send_recv(Command.unobserve_property(observer_id))
            except MpvSocketError as e:
                if isinstance(e, SocketClosedError) or is_closing_error(e.__cause__):
                    # mpv is closing, nothing stale is left behind
                    logger.debug("mpv closed during unobserve: %s", e)
                else:
                    logger.warning("error while closing subscription: %s", e)
                return
