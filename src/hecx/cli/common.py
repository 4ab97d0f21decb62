from __future__ import annotations

import logging
import os
from collections.abc import Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

import typer
from rich.console import Console
from rich.markup import escape

from ..config import ConfigData, ConfigStore, build_context
from ..context import ConnectionContext
from ..errors import HecxError, UnexpectedStatusError

console = Console(stderr=True)

LOG_LEVEL_ENV = "HECX_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"


def configure_logging() -> None:
    """Send ``hecx`` logs to stderr at the level named by ``HECX_LOG_LEVEL``."""

    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)

    logger = logging.getLogger("hecx")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)


CommandParams = ParamSpec("CommandParams")
CommandReturn = TypeVar("CommandReturn")


def handle_cli_errors(
    func: Callable[CommandParams, CommandReturn],
) -> Callable[CommandParams, CommandReturn]:
    @wraps(func)
    def wrapper(*args: CommandParams.args, **kwargs: CommandParams.kwargs) -> CommandReturn:
        try:
            return func(*args, **kwargs)
        except typer.BadParameter:
            raise
        except typer.Exit:
            raise
        except UnexpectedStatusError as exc:
            console.print(f"[red]Error:[/red] HTTP {exc.status_code}: {escape(str(exc))}", highlight=False)
            raise typer.Exit(1) from None
        except HecxError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
            raise typer.Exit(1) from None
        except Exception as exc:
            if os.getenv("HECX_DEBUG"):
                raise
            console.print(f"[red]Error:[/red] Unexpected failure: {escape(str(exc))}", highlight=False)
            console.print("Set HECX_DEBUG=1 for a stack trace.")
            raise typer.Exit(1) from exc

    return wrapper


def get_config(ctx: typer.Context) -> ConfigData:
    """Return the :class:`ConfigData` cached on ``ctx``, loading it once."""

    ctx_obj = cast(dict[str, Any], ctx.ensure_object(dict))
    existing = ctx_obj.get("config")
    if isinstance(existing, ConfigData):
        return existing
    cfg = ConfigStore(ctx_obj.get("config_path")).load()
    ctx_obj["config"] = cfg
    return cfg


def get_context(ctx: typer.Context) -> ConnectionContext:
    """Return the connection context shared by every command of this process."""

    ctx_obj = cast(dict[str, Any], ctx.ensure_object(dict))
    existing = ctx_obj.get("connection")
    if isinstance(existing, ConnectionContext):
        return existing
    connection = build_context(
        url=ctx_obj.get("url"),
        username=ctx_obj.get("username"),
        password=ctx_obj.get("password"),
        config=get_config(ctx),
    )
    ctx_obj["connection"] = connection
    return connection


__all__ = [
    "console",
    "configure_logging",
    "handle_cli_errors",
    "get_config",
    "get_context",
]
