"""Inspect and persist connection defaults."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, cast

import typer

from ..config import ConfigStore
from .common import get_config, get_context, handle_cli_errors

app = typer.Typer(help="Show or update stored connection settings", no_args_is_help=True)


def _load_rules(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Rules file is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter("Rules file must contain a JSON object")
    return cast(dict[str, Any], data)


@app.command("show")
@handle_cli_errors
def config_show(ctx: typer.Context) -> None:
    """Print the effective connection settings with the password masked."""

    connection = get_context(ctx)
    creds = connection.credentials
    payload = {
        "url": connection.url,
        "username": creds.username if creds else None,
        "password": "***" if creds and creds.password else None,
        "auth_rules": connection.auth_rules,
    }
    typer.echo(json.dumps(payload, indent=4))


@app.command("set")
@handle_cli_errors
def config_set(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", help="Server base URL"),
    username: str | None = typer.Option(None, "--username", help="Default username"),
    password: str | None = typer.Option(None, "--password", help="Default password"),
    rules: Path | None = typer.Option(  # noqa: B008
        None,
        "--rules",
        exists=True,
        dir_okay=False,
        help="JSON file mapping rule keys to access levels",
    ),
) -> None:
    """Persist connection defaults to the config file."""

    store = ConfigStore(ctx.ensure_object(dict).get("config_path"))
    cfg = get_config(ctx)
    if url is not None:
        cfg.url = url
    if username is not None:
        cfg.username = username
    if password is not None:
        cfg.password = password
    if rules is not None:
        cfg.auth_rules = _load_rules(rules)
    store.save(cfg)
    typer.echo(f"Saved settings to {store.path}", err=True)
