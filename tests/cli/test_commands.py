"""Tests for mpv-socket CLI commands."""

from __future__ import annotations

import json
import logging

import pytest
from click.testing import CliRunner

from mpv_socket.core import logging_config
from mpv_socket.frontends.cli.commands import (
    cli,
    client_name,
    get_property,
    list_properties,
    observe,
    set_property,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI configures the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_config._configured = False


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, mpv_server, monkeypatch):
    """Run the CLI against the fake mpv."""
    monkeypatch.delenv("MPV_SOCKET_CONFIG", raising=False)

    def run(*args: str):
        return runner.invoke(cli, ["--socket", mpv_server.path, *args])

    return run


class TestCommandDefinitions:
    """Test that commands and options are defined."""

    def test_commands_registered(self):
        assert set(cli.commands) >= {"client-name", "time", "version", "get", "set", "observe", "properties"}

    def test_group_has_socket_option(self):
        param_names = [p.name for p in cli.params]
        assert "socket_path" in param_names
        assert "config_file" in param_names
        assert "log_level" in param_names

    def test_observe_options(self):
        param_names = [p.name for p in observe.params]
        assert "count" in param_names
        assert "json_output" in param_names

    def test_get_has_json_option(self):
        assert "json_output" in [p.name for p in get_property.params]

    def test_callables(self):
        for command in (client_name, set_property, list_properties):
            assert callable(command)


class TestCommands:
    """Test commands against a fake mpv."""

    def test_client_name(self, invoke):
        result = invoke("client-name")
        assert result.exit_code == 0
        assert result.output.strip() == "ipc-3"

    def test_time_and_version(self, invoke):
        assert invoke("time").output.strip() == "1234567"
        assert invoke("version").output.strip() == "131072"

    def test_get(self, invoke):
        result = invoke("get", "volume")
        assert result.exit_code == 0
        assert result.output.strip() == "50.0"

    def test_get_json(self, invoke):
        result = invoke("get", "filename", "--json")
        assert json.loads(result.output) == "video.mkv"

    def test_get_unavailable(self, invoke):
        result = invoke("get", "duration")
        assert result.exit_code == 1
        assert "property unavailable" in result.output

    def test_get_unknown_property(self, invoke):
        result = invoke("get", "bogus")
        assert result.exit_code == 2
        assert "unknown property" in result.output

    def test_set_parses_json(self, invoke, mpv_server):
        assert invoke("set", "pause", "true").exit_code == 0
        assert invoke("set", "path", "some file.mkv").exit_code == 0
        assert mpv_server.properties["pause"] is True
        assert mpv_server.properties["path"] == "some file.mkv"

    def test_observe(self, invoke, mpv_server):
        mpv_server.after(
            "observe_property",
            {"event": "property-change", "id": 1, "name": "pause", "data": True},
            {"event": "property-change", "id": 2, "name": "volume", "data": 20.0},
            occurrence=2,
        )

        result = invoke("observe", "pause", "volume", "--count", "2")

        assert result.exit_code == 0
        assert result.output.splitlines() == ["pause: true", "volume: 20.0"]
        assert mpv_server.commands("unobserve_property") == [
            ["unobserve_property", 1],
            ["unobserve_property", 2],
        ]

    def test_observe_json(self, invoke, mpv_server):
        mpv_server.after(
            "observe_property",
            {"event": "property-change", "id": 1, "name": "volume", "data": 20.0},
            {"event": "shutdown"},
        )

        result = invoke("observe", "volume", "--json")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"name": "volume", "data": 20.0, "id": 1}

    def test_connection_error(self, runner, socket_path):
        result = runner.invoke(cli, ["--socket", socket_path, "client-name"])
        assert result.exit_code == 1
        assert "failed to open mpv socket" in result.output

    def test_properties(self, runner):
        result = runner.invoke(cli, ["properties"])
        assert result.exit_code == 0
        assert "filename/no-ext" in result.output
        assert "time-start" in result.output
