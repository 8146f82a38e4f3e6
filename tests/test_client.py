"""Tests for MpvSocket request/response handling."""

from __future__ import annotations

import errno

import pytest

from mpv_socket import (
    MpvCommandError,
    MpvConnectionError,
    MpvSocket,
    Property,
    ProtocolError,
    RequestId,
    SocketClosedError,
    ValueTypeError,
    as_float,
)
from mpv_socket.core.protocol import Command


def ok(request_id, data=None):
    reply = {"request_id": request_id, "error": "success"}
    if data is not None:
        reply["data"] = data
    return reply


class TestRequestId:
    """Test request id allocation."""

    def test_starts_at_one(self):
        ids = RequestId()
        assert [ids.next(), ids.next(), ids.next()] == [1, 2, 3]

    def test_wraps_at_int64_overflow(self):
        ids = RequestId(2**63 - 2)
        assert ids.next() == 2**63 - 1
        assert ids.next() == -(2**63)
        assert ids.next() == -(2**63) + 1

    def test_advance(self):
        ids = RequestId()
        assert ids.advance(10) == 10


class TestSendRecv:
    """Test MpvSocket.send_recv()."""

    def test_returns_data_for_matching_reply(self, scripted_channel):
        channel = scripted_channel([{"request_id": 1, "error": "success", "data": 50.0}])
        mpv = MpvSocket(channel)

        assert mpv.get_property(Property.VOLUME) == 50.0
        assert channel.requests == [{"command": ["get_property", "volume"], "request_id": 1}]

    def test_request_ids_increment(self, scripted_channel):
        channel = scripted_channel([ok(1), ok(2), ok(3)])
        mpv = MpvSocket(channel)

        for _ in range(3):
            mpv.set_property(Property.PAUSE, True)

        assert [r["request_id"] for r in channel.requests] == [1, 2, 3]

    def test_request_ids_wrap(self, scripted_channel):
        channel = scripted_channel([ok(2**63 - 1), ok(-(2**63))])
        mpv = MpvSocket(channel)
        mpv._last_request_id = RequestId(2**63 - 2)

        mpv.send_recv(Command.client_name())
        mpv.send_recv(Command.client_name())

        assert [r["request_id"] for r in channel.requests] == [2**63 - 1, -(2**63)]

    def test_skips_events_and_other_replies(self, scripted_channel):
        channel = scripted_channel(
            [
                {"event": "property-change", "id": 1, "name": "volume", "data": 10.0},
                {"request_id": 99, "error": "success", "data": "wrong"},
                {"error": "success", "data": "no id"},
                ok(1, "ipc-5"),
            ]
        )
        mpv = MpvSocket(channel)

        assert mpv.client_name() == "ipc-5"
        assert not channel.inbound

    def test_set_property_round_trip(self, scripted_channel):
        channel = scripted_channel(['{"request_id":1,"error":"success"}'])
        mpv = MpvSocket(channel)

        assert mpv.set_property(Property.PAUSE, True) is None
        assert channel.commands == [["set_property", "pause", True]]

    def test_error_reply(self, scripted_channel):
        channel = scripted_channel([{"request_id": 1, "error": "property unavailable"}])
        mpv = MpvSocket(channel)

        with pytest.raises(MpvCommandError, match="property unavailable"):
            mpv.get_property(Property.DURATION)
        assert not mpv.closed

    def test_unknown_reply_shape(self, scripted_channel):
        channel = scripted_channel([{"request_id": 1, "data": 1}])
        mpv = MpvSocket(channel)

        with pytest.raises(ProtocolError, match="unknown mpv response"):
            mpv.get_version()

    def test_malformed_line(self, scripted_channel):
        channel = scripted_channel(["garbage"])
        mpv = MpvSocket(channel)

        with pytest.raises(ProtocolError):
            mpv.client_name()

    def test_typed_accessors(self, scripted_channel):
        channel = scripted_channel([ok(1, "ipc-1"), ok(2, 1234567), ok(3, 131072), ok(4, 12)])
        mpv = MpvSocket(channel)

        assert mpv.client_name() == "ipc-1"
        assert mpv.get_time_us() == 1234567
        assert mpv.get_version() == 131072
        assert mpv.get_property(Property.VOLUME, as_float) == 12.0

    def test_type_mismatch(self, scripted_channel):
        channel = scripted_channel([ok(1, 42)])
        mpv = MpvSocket(channel)

        with pytest.raises(ValueTypeError, match="expected string"):
            mpv.client_name()

    def test_request_log_messages(self, scripted_channel):
        channel = scripted_channel([ok(1)])
        MpvSocket(channel).request_log_messages("warn")
        assert channel.commands == [["request_log_messages", "warn"]]


class TestClosedState:
    """Test that a closed connection fails fast."""

    def test_closed_socket_rejects_commands(self, scripted_channel):
        channel = scripted_channel([ok(1)])
        mpv = MpvSocket(channel)
        mpv.close()

        with pytest.raises(SocketClosedError, match="closed"):
            mpv.client_name()
        assert channel.sent == b""
        assert channel.closed

    def test_context_manager_closes(self, scripted_channel):
        channel = scripted_channel()
        with MpvSocket(channel) as mpv:
            assert not mpv.closed
        assert mpv.closed
        assert channel.closed

    def test_end_of_stream_while_waiting(self, scripted_channel):
        mpv = MpvSocket(scripted_channel())

        with pytest.raises(SocketClosedError, match="reply was pending"):
            mpv.client_name()
        assert mpv.closed

    def test_write_failure_marks_closed(self, scripted_channel):
        error = OSError(errno.EPIPE, "Broken pipe")
        mpv = MpvSocket(scripted_channel(write_error=error))

        with pytest.raises(MpvConnectionError) as exc_info:
            mpv.client_name()
        assert exc_info.value.__cause__ is error
        assert mpv.closed

        with pytest.raises(SocketClosedError):
            mpv.client_name()

    def test_read_failure_marks_closed(self, scripted_channel):
        mpv = MpvSocket(scripted_channel(read_error=ConnectionResetError(errno.ECONNRESET, "reset")))

        with pytest.raises(MpvConnectionError, match="failed to read"):
            mpv.get_version()
        assert mpv.closed


class TestConnect:
    """Test MpvSocket.connect() against a fake mpv."""

    def test_commands(self, mpv_server):
        with MpvSocket.connect(mpv_server.path) as mpv:
            assert mpv.client_name() == "ipc-3"
            assert mpv.get_property("filename") == "video.mkv"
            mpv.set_property(Property.VOLUME, 75)
            assert mpv.get_property(Property.VOLUME, as_float) == 75.0

        assert mpv_server.received[0] == ["client_name"]
        assert mpv_server.properties["volume"] == 75

    def test_missing_socket(self, socket_path):
        with pytest.raises(MpvConnectionError, match="failed to open mpv socket"):
            MpvSocket.connect(socket_path)
