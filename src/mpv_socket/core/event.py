"""mpv events.

Events arrive unsolicited on the same stream as command replies. Each
event line has an ``event`` field with the kebab-case event name plus
event-specific fields.

Official documentation: https://mpv.io/manual/master/#list-of-events
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from mpv_socket.core.errors import ProtocolError
from mpv_socket.core.property import Property
from mpv_socket.core.value import Value


class EventKind(str, Enum):
    """Known event names."""

    PROPERTY_CHANGE = "property-change"  # Observed property changed
    START_FILE = "start-file"  # Right before a new file is loaded
    END_FILE = "end-file"  # After a file was unloaded
    FILE_LOADED = "file-loaded"  # File loaded, playback begins
    SEEK = "seek"  # On seeking, including internal seeks
    PLAYBACK_RESTART = "playback-restart"  # Playback start after seek or load
    SHUTDOWN = "shutdown"  # Player quits
    VIDEO_RECONFIG = "video-reconfig"  # Video output or filter reconfig
    AUDIO_RECONFIG = "audio-reconfig"  # Audio output or filter reconfig
    LOG_MESSAGE = "log-message"  # Enabled with request_log_messages

    # Deprecated: use observe_property instead
    TRACKS_CHANGED = "tracks-changed"
    TRACK_SWITCHED = "track-switched"
    PAUSE = "pause"
    UNPAUSE = "unpause"
    METADATA_UPDATE = "metadata-update"
    IDLE = "idle"
    TICK = "tick"
    CHAPTER_CHANGE = "chapter-change"

    @property
    def deprecated(self) -> bool:
        return self in _DEPRECATED_KINDS


_DEPRECATED_KINDS = frozenset(
    {
        EventKind.TRACKS_CHANGED,
        EventKind.TRACK_SWITCHED,
        EventKind.PAUSE,
        EventKind.UNPAUSE,
        EventKind.METADATA_UPDATE,
        EventKind.IDLE,
        EventKind.TICK,
        EventKind.CHAPTER_CHANGE,
    }
)


class EndFileReason(str, Enum):
    """Why playback of a file ended."""

    EOF = "eof"  # The file has ended
    STOP = "stop"  # Ended by a command
    QUIT = "quit"  # Ended by the quit command
    ERROR = "error"  # An error happened, see file_error
    REDIRECT = "redirect"  # Playlist expansion and similar
    UNKNOWN = "unknown"  # Unrecognized reason

    @classmethod
    def parse(cls, text: str) -> EndFileReason:
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class PropertyChangeEvent:
    """A change of an observed property.

    Attributes:
        name: The property whose value changed.
        data: New value. May be None while the player shuts down or the
            property is unavailable.
        id: Observer id the change is addressed to.
    """

    name: Property
    data: Value = None
    id: int | None = None


@dataclass(frozen=True)
class StartFileEvent:
    playlist_entry_id: int | None = None


@dataclass(frozen=True)
class EndFileEvent:
    """Playback of a file ended.

    Attributes:
        reason: Why playback ended.
        playlist_entry_id: Entry that was played, same as in start-file.
        file_error: mpv error string if playback failed.
        playlist_insert_id: First entry inserted in place of this one
            (playlist redirects).
        playlist_insert_num_entries: Number of inserted entries.
    """

    reason: EndFileReason
    playlist_entry_id: int | None = None
    file_error: str | None = None
    playlist_insert_id: int | None = None
    playlist_insert_num_entries: int | None = None


@dataclass(frozen=True)
class LogMessageEvent:
    prefix: str
    level: str
    text: str


EventData = PropertyChangeEvent | StartFileEvent | EndFileEvent | LogMessageEvent


def _field(message: dict[str, Any], key: str, kind: type | tuple[type, ...], required: bool = False) -> Any:
    """Fetch an optional typed field from an event object."""
    value = message.get(key)
    if value is None:
        if required:
            raise ProtocolError(f"event {message.get('event')!r} is missing field {key!r}")
        return None
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ProtocolError(f"event field {key!r} has unexpected value: {value!r}")
    return value


def parse_event_data(kind: EventKind | None, message: dict[str, Any]) -> EventData | None:
    """Build the typed payload for an event object.

    Args:
        kind: Event kind, None for event names this library doesn't know.
        message: The decoded event line.

    Returns:
        Typed payload, or None for events without fields of interest.

    Raises:
        ProtocolError: If a required field is missing or mistyped.
    """
    if kind is EventKind.PROPERTY_CHANGE:
        name = _field(message, "name", str, required=True)
        try:
            prop = Property.parse(name)
        except ValueError as e:
            raise ProtocolError(f"property-change for {e}") from e
        return PropertyChangeEvent(
            name=prop,
            data=message.get("data"),
            id=_field(message, "id", int),
        )

    if kind is EventKind.START_FILE:
        return StartFileEvent(playlist_entry_id=_field(message, "playlist_entry_id", int))

    if kind is EventKind.END_FILE:
        reason = _field(message, "reason", str, required=True)
        return EndFileEvent(
            reason=EndFileReason.parse(reason),
            playlist_entry_id=_field(message, "playlist_entry_id", int),
            file_error=_field(message, "file_error", str),
            playlist_insert_id=_field(message, "playlist_insert_id", int),
            playlist_insert_num_entries=_field(message, "playlist_insert_num_entries", int),
        )

    if kind is EventKind.LOG_MESSAGE:
        return LogMessageEvent(
            prefix=_field(message, "prefix", str) or "",
            level=_field(message, "level", str) or "",
            text=_field(message, "text", str) or "",
        )

    return None
