"""Wire codec for the mpv JSON IPC protocol.

Message framing is newline-delimited UTF-8 JSON, one object per line.

Outbound command:
    {"command": ["<name>", <param>...], "request_id": <int64>}

Inbound command reply:
    {"request_id": <int64>, "error": "<string>", "data": <any>}

Inbound event:
    {"event": "<kebab-case-name>", ...fields, "id": <int64>, "error": <string>}

Official documentation: https://mpv.io/manual/master/#json-ipc
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from mpv_socket.core.errors import MpvCommandError, ProtocolError
from mpv_socket.core.event import EventData, EventKind, parse_event_data
from mpv_socket.core.property import Property
from mpv_socket.core.value import Value, to_value

SUCCESS = "success"


@dataclass(frozen=True)
class Command:
    """A named mpv command with positional parameters.

    Use the constructors rather than building names by hand:

        >>> Command.get_property(Property.VOLUME).to_wire()
        ['get_property', 'volume']
    """

    name: str
    params: tuple[Value, ...] = field(default=())

    def to_wire(self) -> list[Value]:
        return [self.name, *self.params]

    @classmethod
    def client_name(cls) -> Command:
        return cls("client_name")

    @classmethod
    def get_time_us(cls) -> Command:
        return cls("get_time_us")

    @classmethod
    def get_property(cls, prop: Property | str) -> Command:
        return cls("get_property", (str(Property.parse(prop)),))

    @classmethod
    def set_property(cls, prop: Property | str, value: Any) -> Command:
        return cls("set_property", (str(Property.parse(prop)), to_value(value)))

    @classmethod
    def observe_property(cls, observer_id: int, prop: Property | str) -> Command:
        return cls("observe_property", (observer_id, str(Property.parse(prop))))

    @classmethod
    def unobserve_property(cls, observer_id: int) -> Command:
        return cls("unobserve_property", (observer_id,))

    @classmethod
    def request_log_messages(cls, level: str) -> Command:
        return cls("request_log_messages", (level,))

    @classmethod
    def get_version(cls) -> Command:
        return cls("get_version")


@dataclass(frozen=True)
class Request:
    """A command tagged with the request id its reply will carry."""

    command: Command
    request_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.command.to_wire(), "request_id": self.request_id}

    def encode(self) -> bytes:
        """Serialize as one newline-terminated JSON line."""
        data = json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return f"{data}\n".encode()


def decode_line(line: bytes | str) -> dict[str, Any]:
    """Decode one line into a JSON object.

    Invalid UTF-8 is replaced rather than rejected.

    Raises:
        ProtocolError: If the line is not a JSON object.
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    try:
        message = json.loads(line)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"invalid JSON from mpv: {e} (line: {line.strip()[:100]!r})") from e
    if not isinstance(message, dict):
        raise ProtocolError(f"expected JSON object from mpv, got: {line.strip()[:100]!r}")
    return message


def _optional(message: dict[str, Any], key: str, kind: type) -> Any:
    value = message.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ProtocolError(f"field {key!r} has unexpected value: {value!r}")
    return value


@dataclass(frozen=True)
class CommandResponse:
    """Reply envelope. Event lines parse to a response without request id."""

    request_id: int | None = None
    error: str | None = None
    data: Value = None

    @classmethod
    def parse(cls, line: bytes | str) -> CommandResponse:
        message = decode_line(line)
        return cls(
            request_id=_optional(message, "request_id", int),
            error=_optional(message, "error", str),
            data=message.get("data"),
        )

    def result(self) -> Value:
        """Unwrap the reply.

        Raises:
            MpvCommandError: If mpv reported an error.
            ProtocolError: If the reply has no error field at all.
        """
        if self.error == SUCCESS:
            return self.data
        if self.error is not None:
            raise MpvCommandError(self.error)
        raise ProtocolError(f"unknown mpv response: {self!r}")


@dataclass(frozen=True)
class EventResponse:
    """Event envelope.

    Attributes:
        event: Event name as sent by mpv.
        data: Typed payload for events that carry one.
        id: Observer id, for property-change events.
        error: Error string, if mpv attached one.
    """

    event: str
    data: EventData | None = None
    id: int | None = None
    error: str | None = None

    @property
    def kind(self) -> EventKind | None:
        """Known event kind, or None for events this library doesn't know."""
        try:
            return EventKind(self.event)
        except ValueError:
            return None

    @classmethod
    def parse(cls, line: bytes | str) -> EventResponse:
        """Parse an event line.

        Raises:
            ProtocolError: If the line is not an event or is malformed.
        """
        message = decode_line(line)
        name = message.get("event")
        if not isinstance(name, str):
            raise ProtocolError(f"expected mpv event, got: {message!r}")
        try:
            kind: EventKind | None = EventKind(name)
        except ValueError:
            kind = None
        return cls(
            event=name,
            data=parse_event_data(kind, message),
            id=_optional(message, "id", int),
            error=_optional(message, "error", str),
        )
