from __future__ import annotations

from pathlib import Path

import typer

from . import config, server
from .common import configure_logging

app = typer.Typer(help="Hecate server client", no_args_is_help=True)

app.add_typer(server.app, name="server")
app.add_typer(config.app, name="config")


@app.callback()
def common(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", help="Server base URL (env HECATE_URL)"),
    username: str | None = typer.Option(
        None, "--username", help="Username for basic auth (env HECATE_USERNAME)"
    ),
    password: str | None = typer.Option(
        None, "--password", help="Password for basic auth (env HECATE_PASSWORD)"
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None, "--config", dir_okay=False, help="Config file (default ~/.hecx/config.json)"
    ),
) -> None:
    """Initialize shared Typer context state."""

    configure_logging()
    ctx.ensure_object(dict)
    ctx.obj.update(
        {"url": url, "username": username, "password": password, "config_path": config_path}
    )


__all__ = ["app"]
