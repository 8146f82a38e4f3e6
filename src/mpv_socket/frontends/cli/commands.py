"""mpv-socket commands - talk to a running mpv from the shell."""

from __future__ import annotations

import itertools
import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import rich_click as click

from mpv_socket.client import MpvSocket
from mpv_socket.config import SocketConfig, load_config
from mpv_socket.core.errors import MpvSocketError
from mpv_socket.core.logging_config import configure_logging
from mpv_socket.core.property import Property
from mpv_socket.frontends.cli.output import error_exit, format_value, output_json, print_table

click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.MAX_WIDTH = 100


def _parse_property(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
    """Click callback turning property names into Property members."""
    try:
        if isinstance(value, tuple):
            return tuple(Property.parse(v) for v in value)
        return Property.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@contextmanager
def connected(config: SocketConfig) -> Iterator[MpvSocket]:
    """Connect for one command; mpv errors print and exit with code 1."""
    try:
        with MpvSocket.from_config(config) as mpv:
            yield mpv
    except MpvSocketError as e:
        error_exit(str(e))


@click.group()
@click.version_option(package_name="mpv-socket")
@click.option("--socket", "-s", "socket_path", default=None, help="mpv IPC socket or named pipe path")
@click.option("--config", "config_file", default=None, help="YAML config file")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: MPV_SOCKET_LOG_LEVEL or WARNING)",
)
@click.pass_context
def cli(ctx: click.Context, socket_path: str | None, config_file: str | None, log_level: str | None) -> None:
    """mpv-socket - talk to mpv over its JSON IPC socket.

    Start mpv with `--input-ipc-server=/tmp/mpv-socket` (or a named pipe
    on Windows), then:

        mpv-socket get volume

        mpv-socket set pause true

        mpv-socket observe playback-time --count 10
    """
    configure_logging(level=log_level)
    try:
        ctx.obj = load_config(path=socket_path, config_file=config_file)
    except ValueError as e:
        error_exit(str(e))


@cli.command("client-name")
@click.pass_obj
def client_name(config: SocketConfig) -> None:
    """Print this client's name ("ipc-N")."""
    with connected(config) as mpv:
        click.echo(mpv.client_name())


@cli.command("time")
@click.pass_obj
def time_us(config: SocketConfig) -> None:
    """Print mpv's internal time in microseconds."""
    with connected(config) as mpv:
        click.echo(str(mpv.get_time_us()))


@cli.command()
@click.pass_obj
def version(config: SocketConfig) -> None:
    """Print the client API version of the running mpv."""
    with connected(config) as mpv:
        click.echo(str(mpv.get_version()))


@cli.command("get")
@click.argument("prop", metavar="PROPERTY", callback=_parse_property)
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
@click.pass_obj
def get_property(config: SocketConfig, prop: Property, json_output: bool) -> None:
    """Print the value of a property."""
    with connected(config) as mpv:
        value = mpv.get_property(prop)
    if json_output:
        output_json(value)
    else:
        click.echo(format_value(value))


@cli.command("set")
@click.argument("prop", metavar="PROPERTY", callback=_parse_property)
@click.argument("value")
@click.pass_obj
def set_property(config: SocketConfig, prop: Property, value: str) -> None:
    """Set a property. VALUE is parsed as JSON, otherwise taken as text.

    **Examples:**

        mpv-socket set pause true

        mpv-socket set volume 50
    """
    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    with connected(config) as mpv:
        mpv.set_property(prop, parsed)


@cli.command()
@click.argument("props", metavar="PROPERTY...", nargs=-1, required=True, callback=_parse_property)
@click.option("--count", "-n", default=None, type=int, help="Stop after N changes")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output one JSON object per change")
@click.pass_obj
def observe(config: SocketConfig, props: tuple[Property, ...], count: int | None, json_output: bool) -> None:
    """Print property changes until mpv quits.

    Properties are unobserved on exit, including Ctrl+C.
    """
    with connected(config) as mpv, mpv.observe_properties(props) as changes:
        for change in itertools.islice(changes, count):
            if json_output:
                output_json({"name": str(change.name), "data": change.data, "id": change.id}, indent=None)
            else:
                click.echo(f"{change.name}: {format_value(change.data)}")


@cli.command("properties")
def list_properties() -> None:
    """List the known property names."""
    rows = [[str(p), "yes" if p.deprecated else ""] for p in Property]
    print_table(["PROPERTY", "DEPRECATED"], rows)
