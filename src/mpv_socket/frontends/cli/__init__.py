"""mpv-socket command line interface."""

from mpv_socket.frontends.cli.main import main

__all__ = ["main"]
