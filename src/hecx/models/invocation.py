"""Pydantic models describing how a server call was invoked."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class InvocationMode(str, Enum):
    PROGRAMMATIC = "programmatic"
    SCRIPTED = "scripted"
    INTERACTIVE = "interactive"


class InvocationOptions(BaseModel):
    """Per-call flags; ``script`` and ``cli`` are accepted as legacy spellings."""

    programmatic: bool = False
    scripted: bool = Field(default=False, validation_alias=AliasChoices("scripted", "script"))
    interactive: bool = Field(default=False, validation_alias=AliasChoices("interactive", "cli"))

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @property
    def mode(self) -> InvocationMode:
        if self.scripted:
            return InvocationMode.SCRIPTED
        if self.interactive:
            return InvocationMode.INTERACTIVE
        return InvocationMode.PROGRAMMATIC


_FLAG = TypeAdapter(bool)
_FLAG_KEYS: dict[str, tuple[str, ...]] = {
    "programmatic": ("programmatic",),
    "scripted": ("scripted", "script"),
    "interactive": ("interactive", "cli"),
}


def _flag(options: Mapping[Any, Any], keys: tuple[str, ...]) -> bool:
    for key in keys:
        if key not in options:
            continue
        try:
            if _FLAG.validate_python(options[key]):
                return True
        except ValidationError:
            continue
    return False


def select_mode(options: InvocationOptions | Mapping[str, Any] | None) -> InvocationMode:
    """Return the invocation mode for ``options``.

    Each flag is read on its own; a value that cannot be read as a boolean
    counts as unset. Missing or empty options fall back to
    :attr:`InvocationMode.PROGRAMMATIC` instead of raising.
    """

    if isinstance(options, InvocationOptions):
        return options.mode
    if not options or not isinstance(options, Mapping):
        return InvocationMode.PROGRAMMATIC
    flags = {name: _flag(options, keys) for name, keys in _FLAG_KEYS.items()}
    return InvocationOptions(**flags).mode
