"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
import os
import socket
import tempfile
import threading
from collections import deque
from collections.abc import Callable, Iterator
from typing import Any

import pytest


def encode_line(line: dict[str, Any] | str | bytes) -> bytes:
    """Encode a scripted line: dicts as compact JSON, newline added."""
    if isinstance(line, dict):
        line = json.dumps(line)
    if isinstance(line, str):
        line = line.encode()
    return line if line.endswith(b"\n") else line + b"\n"


class ScriptedChannel:
    """In-memory channel that replays scripted inbound lines.

    readline() returns b"" once the script runs out, like a closed socket.
    Outbound writes are recorded; write_error, if set, is raised by every
    write after the first fail_after writes.
    """

    def __init__(
        self,
        lines: list[dict[str, Any] | str | bytes] | None = None,
        write_error: OSError | None = None,
        fail_after: int = 0,
        read_error: OSError | None = None,
    ):
        self.inbound: deque[bytes] = deque(encode_line(line) for line in lines or [])
        self.sent = bytearray()
        self.write_error = write_error
        self.read_error = read_error
        self.fail_after = fail_after
        self.writes = 0
        self.closed = False

    def feed(self, *lines: dict[str, Any] | str | bytes) -> None:
        self.inbound.extend(encode_line(line) for line in lines)

    def readline(self) -> bytes:
        if self.read_error is not None:
            raise self.read_error
        return self.inbound.popleft() if self.inbound else b""

    def write(self, data: bytes) -> int:
        if self.write_error is not None and self.writes >= self.fail_after:
            raise self.write_error
        self.writes += 1
        self.sent += data
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True

    @property
    def requests(self) -> list[dict[str, Any]]:
        return [json.loads(line) for line in self.sent.splitlines()]

    @property
    def commands(self) -> list[list[Any]]:
        return [request["command"] for request in self.requests]


@pytest.fixture
def scripted_channel() -> Callable[..., ScriptedChannel]:
    """Factory for ScriptedChannel instances."""
    return ScriptedChannel


class FakeMpvServer:
    """Minimal mpv IPC peer on a Unix socket, served from a thread.

    Answers client_name, get_time_us, get_version, get_property,
    set_property, observe_property and unobserve_property. Connections
    are served one after another.
    Commands named in hang_up_on are read, then the connection is closed
    without a reply.
    """

    def __init__(self, path: str, properties: dict[str, Any] | None = None):
        self.path = path
        self.properties: dict[str, Any] = dict(properties or {})
        self.received: list[list[Any]] = []
        self.hang_up_on: set[str] = set()
        self._after: dict[str, deque[list[dict[str, Any]]]] = {}
        self._listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._listener.bind(path)
        self._listener.listen(1)
        self._listener.settimeout(0.05)
        self._stopping = threading.Event()
        self._lock = threading.Lock()
        self._conn: socket.socket | None = None
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stopping.set()
        with self._lock:
            if self._conn is not None:
                # shutdown() wakes a recv blocked in the server thread
                try:
                    self._conn.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass
        self._thread.join(timeout=5)
        self._listener.close()

    def after(self, command: str, *events: dict[str, Any], occurrence: int = 1) -> None:
        """Send events right after replying to the nth such command."""
        queue = self._after.setdefault(command, deque())
        while len(queue) < occurrence:
            queue.append([])
        queue[occurrence - 1].extend(events)

    def commands(self, name: str) -> list[list[Any]]:
        return [command for command in self.received if command[0] == name]

    def _send(self, conn: socket.socket, message: dict[str, Any]) -> None:
        with self._lock:
            conn.sendall(json.dumps(message).encode() + b"\n")

    def _serve(self) -> None:
        while not self._stopping.is_set():
            try:
                conn, _ = self._listener.accept()
            except TimeoutError:
                continue
            conn.settimeout(None)
            with self._lock:
                self._conn = conn
            try:
                self._serve_connection(conn)
            except OSError:
                pass
            finally:
                with self._lock:
                    self._conn = None
                conn.close()

    def _serve_connection(self, conn: socket.socket) -> None:
        with conn.makefile("rb") as reader:
            for line in reader:
                request = json.loads(line)
                command = request["command"]
                self.received.append(command)
                if command[0] in self.hang_up_on:
                    return
                reply = self._handle(command)
                reply["request_id"] = request.get("request_id", 0)
                self._send(conn, reply)
                queue = self._after.get(command[0])
                for event in queue.popleft() if queue else []:
                    self._send(conn, event)

    def _handle(self, command: list[Any]) -> dict[str, Any]:
        name, params = command[0], command[1:]
        if name == "client_name":
            return {"error": "success", "data": "ipc-3"}
        if name == "get_time_us":
            return {"error": "success", "data": 1234567}
        if name == "get_version":
            return {"error": "success", "data": 131072}
        if name == "get_property":
            if params[0] not in self.properties:
                return {"error": "property unavailable"}
            return {"error": "success", "data": self.properties[params[0]]}
        if name == "set_property":
            self.properties[params[0]] = params[1]
            return {"error": "success"}
        if name in ("observe_property", "unobserve_property", "request_log_messages"):
            return {"error": "success"}
        return {"error": "invalid parameter"}


@pytest.fixture
def socket_path() -> Iterator[str]:
    """Short socket path (Unix socket paths are limited to ~100 bytes)."""
    with tempfile.TemporaryDirectory(prefix="mpv", dir="/tmp") as directory:
        yield os.path.join(directory, "mpv.sock")


@pytest.fixture
def mpv_server(socket_path: str) -> Iterator[FakeMpvServer]:
    """Running fake mpv peer with a few properties set."""
    if not hasattr(socket, "AF_UNIX") or os.name == "nt":
        pytest.skip("requires Unix domain sockets")
    server = FakeMpvServer(
        socket_path,
        properties={
            "volume": 50.0,
            "pause": False,
            "filename": "video.mkv",
            "playback-time": 0.0,
        },
    )
    server.start()
    try:
        yield server
    finally:
        server.stop()
