"""Client and CLI for Hecate server metadata and statistics."""

from __future__ import annotations

from .clients.server import SERVER_META, SERVER_STATS, Endpoint, FetchResult, ServerClient
from .context import ConnectionContext, Credentials
from .errors import HecxError, PromptError, TransportError, UnexpectedStatusError
from .models.invocation import InvocationMode, InvocationOptions, select_mode

__all__ = [
    "SERVER_META",
    "SERVER_STATS",
    "ConnectionContext",
    "Credentials",
    "Endpoint",
    "FetchResult",
    "HecxError",
    "InvocationMode",
    "InvocationOptions",
    "PromptError",
    "ServerClient",
    "TransportError",
    "UnexpectedStatusError",
    "select_mode",
]
