"""CLI entry point."""

from __future__ import annotations

import importlib.util
import sys


def main() -> None:
    """Main entry point for the CLI."""
    if importlib.util.find_spec("rich_click") is None:
        print("CLI dependencies not installed. Run: pip install mpv-socket[cli]")
        sys.exit(1)

    from mpv_socket.frontends.cli.commands import cli

    cli()


if __name__ == "__main__":
    main()
