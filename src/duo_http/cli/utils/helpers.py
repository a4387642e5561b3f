"""
Helper utilities for CLI commands.
"""

from __future__ import annotations

import typer
from rich.console import Console

# Default console for error output
_console = Console()


def parse_params(
    values: list[str] | None,
    console: Console | None = None,
) -> dict[str, str]:
    """Parse repeated ``name=value`` options into a parameter mapping.

    The value may itself contain ``=``; only the first one separates
    name from value. A later option with the same name wins.

    Args:
        values: Raw option values
        console: Console for error output (uses default if None)

    Returns:
        Parameter mapping

    Raises:
        typer.Exit: If an option has no ``=`` or an empty name
    """
    console = console or _console
    params: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            console.print(f"[red]Invalid parameter '{item}', expected name=value[/red]")
            raise typer.Exit(1)
        params[name] = value
    return params
