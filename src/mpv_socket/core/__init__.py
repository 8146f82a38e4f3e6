"""Core - protocol data model.

Pure data and codec with no I/O:
    value       Value model and typed accessors
    property    Known property names
    event       Event kinds and payloads
    protocol    Wire codec for commands, replies and events
    errors      Exception hierarchy
"""

from mpv_socket.core.errors import (
    MpvCommandError,
    MpvConnectionError,
    MpvSocketError,
    ProtocolError,
    SocketClosedError,
    ValueTypeError,
)
from mpv_socket.core.event import (
    EndFileEvent,
    EndFileReason,
    EventKind,
    LogMessageEvent,
    PropertyChangeEvent,
    StartFileEvent,
)
from mpv_socket.core.property import Property
from mpv_socket.core.protocol import Command, CommandResponse, EventResponse, Request
from mpv_socket.core.value import (
    Value,
    as_bool,
    as_dict,
    as_float,
    as_int,
    as_list,
    as_str,
    as_uint,
    as_value,
)

__all__ = [
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
    # Properties
    "Property",
    # Protocol
    "Command",
    "Request",
    "CommandResponse",
    "EventResponse",
    # Values
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
