"""Commands for the server metadata and statistics endpoints."""

from __future__ import annotations

import typer

from ..clients.server import SERVER_META, SERVER_STATS, Endpoint, ServerClient
from ..models.invocation import InvocationOptions
from .common import get_context, handle_cli_errors

app = typer.Typer(
    help="Fetch metadata about the server",
    no_args_is_help=True,
)

SCRIPT_OPTION = typer.Option(
    False,
    "--script",
    help="Never prompt for credentials; print JSON only (for pipes and scripts)",
)


def _run(ctx: typer.Context, endpoint: Endpoint, script: bool) -> None:
    options = InvocationOptions(scripted=script, interactive=not script)
    with ServerClient(get_context(ctx)) as client:
        client.fetch(endpoint, options)


@app.command("get", help="Get server meta")
@handle_cli_errors
def server_get(ctx: typer.Context, script: bool = SCRIPT_OPTION) -> None:
    """Print the server metadata document as JSON."""

    _run(ctx, SERVER_META, script)


@app.command("stats", help="Get geo stats from server")
@handle_cli_errors
def server_stats(ctx: typer.Context, script: bool = SCRIPT_OPTION) -> None:
    """Print geometry statistics as JSON."""

    _run(ctx, SERVER_STATS, script)
