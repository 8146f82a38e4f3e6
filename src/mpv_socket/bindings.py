"""Reduced entry point for embedding hosts.

Hosts that cannot drive an iterator get a single blocking call that
observes one property and reports each change as a float through a
callback. Library errors come back as an opaque printable
:class:`BindingError` instead of an exception. An unexpected internal
error aborts the process rather than leaving the host in an unknown state.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from mpv_socket.__version__ import __version__
from mpv_socket.client import MpvSocket
from mpv_socket.core.errors import MpvSocketError
from mpv_socket.core.property import Property
from mpv_socket.core.value import as_float

logger = logging.getLogger(__name__)


class BindingError:
    """Opaque error handed back to the host. Print it with str()."""

    def __init__(self, message: str):
        self._message = message

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"BindingError({self._message!r})"


class _CallbackFailed(Exception):
    """Carries an exception raised by the host callback out of the loop."""

    def __init__(self, error: BaseException):
        super().__init__(str(error))
        self.error = error


def version() -> str:
    """Return the mpv_socket version string."""
    return __version__


def _observe_f64(path: str, property_name: str, callback: Callable[[float], None]) -> BindingError | None:
    try:
        prop = Property.parse(property_name)
    except ValueError as e:
        return BindingError(f"invalid property {property_name!r}: {e}")

    try:
        with MpvSocket.connect(path) as mpv, mpv.observe_property(prop, as_float) as values:
            for value in values:
                try:
                    callback(value)
                except Exception as e:
                    raise _CallbackFailed(e) from e
    except MpvSocketError as e:
        return BindingError(str(e))
    return None


def observe_property_f64(path: str, property_name: str, callback: Callable[[float], None]) -> BindingError | None:
    """Observe one property and call callback with each new float value.

    Blocks until mpv ends the stream.

    Args:
        path: mpv socket or named pipe path.
        property_name: Wire name of the property, e.g. "playback-time".
        callback: Called once per change.

    Returns:
        None when the stream ended normally, else a BindingError.
    """
    try:
        return _observe_f64(path, property_name, callback)
    except _CallbackFailed as failed:
        raise failed.error from None
    except Exception:
        logger.critical("unexpected error in observe_property_f64, aborting", exc_info=True)
        os.abort()
