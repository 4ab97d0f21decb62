from __future__ import annotations

import json
from typing import Any


class HecxError(Exception):
    """Base error for hecx."""


class ConfigError(HecxError):
    pass


class PromptError(HecxError):
    """Raised when credentials could not be collected from the terminal."""


class TransportError(HecxError):
    """Raised when the request never produced an HTTP response."""


class UnexpectedStatusError(HecxError):
    def __init__(self, status_code: int, body: Any = None) -> None:
        super().__init__(json.dumps(body, separators=(",", ":"), ensure_ascii=False))
        self.status_code = status_code
        self.body = body
