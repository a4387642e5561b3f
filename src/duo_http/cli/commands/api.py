"""
Raw API access commands.

Provides direct, signed access to the Duo API and a way to inspect the
canonical request string when chasing signature mismatches.
"""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console

from duo_http.auth.encoding import canonical_query_string
from duo_http.auth.hmac import build_canonical_request, format_rfc2822_date
from duo_http.cli.utils import get_client, parse_params
from duo_http.core.config import get_settings
from duo_http.core.exceptions import DuoHttpError, ProtocolError

app = typer.Typer(help="Raw API access")
console = Console()


@app.command("call")
def api_call(
    method: Annotated[str, typer.Argument(help="HTTP method (GET, POST, PUT, DELETE)")],
    path: Annotated[str, typer.Argument(help="API path (e.g., /auth/v2/check)")],
    param: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Request parameter as name=value (repeatable)"),
    ] = None,
    raw: Annotated[
        bool, typer.Option("--raw", "-r", help="Show the full response envelope")
    ] = False,
) -> None:
    """Make a signed request to the API."""
    params = parse_params(param, console)
    client = get_client(console)

    try:
        request = client.new_request(method, path, params)
        if raw:
            console.print_json(data=request.execute_json_request())
        else:
            console.print_json(data=request.execute_request())
    except ProtocolError as e:
        console.print(f"[red]API Error: {e.message}[/red]")
        raise typer.Exit(1) from None
    except DuoHttpError as e:
        console.print(f"[red]Request failed: {e}[/red]")
        raise typer.Exit(1) from None
    finally:
        client.close()


@app.command("canon")
def api_canon(
    method: Annotated[str, typer.Argument(help="HTTP method")],
    path: Annotated[str, typer.Argument(help="API path")],
    param: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Request parameter as name=value (repeatable)"),
    ] = None,
    host: Annotated[
        str | None, typer.Option("--host", "-H", help="API host (defaults to DUO_HOST)")
    ] = None,
    sig_version: Annotated[
        int, typer.Option("--sig-version", "-s", min=1, max=2, help="Signature version")
    ] = 2,
    date: Annotated[
        str | None, typer.Option("--date", help="Date line to use (defaults to now)")
    ] = None,
) -> None:
    """Print the canonical string that would be signed."""
    params = parse_params(param, console)
    host = host or get_settings().host
    if not host:
        console.print("[red]Error: no host given and DUO_HOST not set[/red]")
        raise typer.Exit(1)

    try:
        canon = build_canonical_request(
            date=date or format_rfc2822_date(),
            sig_version=sig_version,
            method=method,
            host=host,
            path=path,
            query=canonical_query_string(params),
        )
    except DuoHttpError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from None

    # json.dumps makes the newlines visible
    console.print(json.dumps(canon), markup=False, highlight=False)
    console.print(canon, markup=False, highlight=False)
