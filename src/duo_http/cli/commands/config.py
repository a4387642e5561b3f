"""
Configuration management commands.

Provides commands for viewing duo-http configuration.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from duo_http.core.config import get_settings

app = typer.Typer(help="Manage duo-http configuration")
console = Console()


@app.command("show")
def show_config() -> None:
    """Show current configuration."""
    settings = get_settings()

    console.print("\n[bold cyan]General Settings[/bold cyan]")
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Debug mode", str(settings.debug))
    table.add_row("Log level", settings.log_level)
    table.add_row("Timeout", f"{settings.timeout}s")
    table.add_row("Signature version", str(settings.sig_version))
    proxy = settings.proxy
    table.add_row("Proxy", proxy.url if proxy else "[dim]None[/dim]")
    console.print(table)

    console.print("\n[bold cyan]Duo API[/bold cyan]")
    duo_table = Table(show_header=False, box=None)
    duo_table.add_column("Setting", style="dim")
    duo_table.add_column("Value")

    duo_table.add_row("Host", settings.host or "[dim]Not set[/dim]")
    if settings.ikey:
        duo_table.add_row("Integration key", f"{settings.ikey[:8]}...")
    else:
        duo_table.add_row("Integration key", "[dim]Not set[/dim]")
    duo_table.add_row(
        "Secret key", "[dim]****[/dim]" if settings.skey.get_secret_value() else "[dim]Not set[/dim]"
    )
    console.print(duo_table)

    console.print()
    if settings.has_credentials:
        console.print("[green]✓ Duo credentials configured[/green]")
    else:
        console.print("[yellow]⚠ Duo credentials not configured[/yellow]")
        console.print("\nSet these environment variables:")
        console.print("  export DUO_HOST=api-xxxxxxxx.duosecurity.com")
        console.print("  export DUO_IKEY=your-integration-key")
        console.print("  export DUO_SKEY=your-secret-key")
