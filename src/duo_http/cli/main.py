"""
Main CLI entry point for duo-http.

Provides the `duo-http` command with subcommands for:
- config: Configuration display
- api: Signed raw API access and canonical string inspection
"""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from duo_http import __version__
from duo_http.cli.commands import api, config
from duo_http.core.config import get_settings

# Main CLI app
app = typer.Typer(
    name="duo-http",
    help="Signed request client for the Duo APIs",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"duo-http version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            "-d",
            envvar="DUO_DEBUG",
            help="Enable debug output",
        ),
    ] = False,
) -> None:
    """
    duo-http - signed Duo API requests.

    Credentials are read from DUO_HOST, DUO_IKEY and DUO_SKEY
    (or a .env file in the current directory).
    """
    settings = get_settings()
    if debug:
        settings.debug = True

    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug, rich_tracebacks=True)],
    )


# Register command groups
app.add_typer(config.app, name="config", help="Show duo-http configuration")
app.add_typer(api.app, name="api", help="Raw API access")


@app.command()
def info() -> None:
    """Show configuration and environment info."""
    settings = get_settings()

    console.print("\n[bold]Configuration:[/bold]")
    console.print(f"  Debug mode: {settings.debug}")
    console.print(f"  Log level: {settings.log_level}")

    console.print("\n[bold]Duo API:[/bold]")
    if settings.has_credentials:
        console.print(f"  Host: {settings.host}")
        console.print(f"  Integration key: {settings.ikey[:8]}...")
        console.print(f"  Signature version: {settings.sig_version}")
        console.print(f"  Timeout: {settings.timeout}s")
    else:
        console.print("  [yellow]Credentials not configured[/yellow]")
        console.print("  Set DUO_HOST, DUO_IKEY, and DUO_SKEY environment variables")


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
