"""Output formatting utilities for CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import rich_click as click


def format_value(value: Any) -> str:
    """Render a value for humans: text as-is, everything else as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def output_json(data: Any, indent: int | None = 2) -> None:
    """Output data as formatted JSON."""
    click.echo(json.dumps(data, indent=indent))


def print_table(headers: list[str], rows: list[list[str]], separator_width: int = 60) -> None:
    """Print rows left-aligned under headers."""
    widths = [max([len(h)] + [len(row[i]) for row in rows]) for i, h in enumerate(headers)]
    # Last column doesn't need padding
    fmt = " ".join([f"{{:<{w}}}" for w in widths[:-1]] + ["{}"])

    click.echo(fmt.format(*headers))
    click.echo("-" * separator_width)
    for row in rows:
        click.echo(fmt.format(*row))


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)
