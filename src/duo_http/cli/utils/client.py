"""
Client utilities for CLI commands.

Provides authenticated API client access with consistent error handling.
"""

from __future__ import annotations

import typer
from rich.console import Console

from duo_http.api.client import DuoClient
from duo_http.core.config import get_settings
from duo_http.core.exceptions import MissingCredentialsError

# Default console for error output
_console = Console()


def get_client(console: Console | None = None) -> DuoClient:
    """Get authenticated Duo API client.

    Checks for valid credentials and returns a configured client.
    Exits with error message if credentials are not configured.

    Args:
        console: Console for error output (uses default if None)

    Returns:
        Configured DuoClient instance

    Raises:
        typer.Exit: If credentials not configured
    """
    console = console or _console

    try:
        config = get_settings().require_client_config()
    except MissingCredentialsError as e:
        console.print("[red]Error: Duo credentials not configured[/red]")
        console.print(e.message)
        console.print("Run 'duo-http config show' for setup instructions")
        raise typer.Exit(1) from None

    return DuoClient.from_config(config)
