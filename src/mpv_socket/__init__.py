"""mpv_socket - client for mpv's JSON IPC protocol.

Talks to a running mpv over its IPC socket (``--input-ipc-server``):
send commands, read and write properties, and subscribe to property
changes as an iterator.

Layers:
    core/       Values, properties, events and the wire codec
    transport/  Opening the socket or named pipe
    client      MpvSocket: connection and request/reply
    subscription  PropertySubscription: property change stream
    frontends/  The mpv-socket command line

Quick Start:
    >>> import itertools
    >>> from mpv_socket import MpvSocket, Property, as_float, as_str
    >>>
    >>> with MpvSocket.connect("/tmp/mpv-socket") as mpv:
    ...     print(mpv.client_name())
    ...     print(mpv.get_property(Property.FILENAME, as_str))
    ...     with mpv.observe_property(Property.PLAYBACK_TIME, as_float) as times:
    ...         for playback_time in itertools.islice(times, 10):
    ...             print(playback_time)
"""

from mpv_socket.__version__ import __version__
from mpv_socket.client import MpvSocket, RequestId
from mpv_socket.config import SocketConfig, load_config
from mpv_socket.core import (
    Command,
    EndFileEvent,
    EndFileReason,
    EventKind,
    LogMessageEvent,
    MpvCommandError,
    MpvConnectionError,
    MpvSocketError,
    Property,
    PropertyChangeEvent,
    ProtocolError,
    SocketClosedError,
    StartFileEvent,
    Value,
    ValueTypeError,
    as_bool,
    as_dict,
    as_float,
    as_int,
    as_list,
    as_str,
    as_uint,
    as_value,
)
from mpv_socket.subscription import PropertySubscription

__all__ = [
    "__version__",
    # Connection
    "MpvSocket",
    "RequestId",
    "PropertySubscription",
    "Command",
    # Config
    "SocketConfig",
    "load_config",
    # Errors
    "MpvSocketError",
    "MpvConnectionError",
    "SocketClosedError",
    "ProtocolError",
    "MpvCommandError",
    "ValueTypeError",
    # Events
    "EventKind",
    "EndFileReason",
    "PropertyChangeEvent",
    "StartFileEvent",
    "EndFileEvent",
    "LogMessageEvent",
    # Values
    "Property",
    "Value",
    "as_value",
    "as_bool",
    "as_str",
    "as_int",
    "as_uint",
    "as_float",
    "as_list",
    "as_dict",
]
