"""Terminal prompts used to collect credentials for interactive calls."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager, redirect_stdout
from typing import Protocol, TextIO

import click
import typer

from .errors import PromptError

DEFAULT_LABEL = "$"


class Prompter(Protocol):
    def configure(self, stream: TextIO, label: str) -> None: ...

    def request_fields(self, names: Sequence[str]) -> dict[str, str]: ...

    def release(self) -> None: ...


class TerminalPrompter:
    """Ask for credential fields on the terminal, echoing to stderr.

    Prompting stops at the first empty ``username`` so that pressing enter
    skips authentication entirely.
    """

    def __init__(self) -> None:
        self.label = DEFAULT_LABEL
        self.to_stderr = True
        self.active = False

    def configure(self, stream: TextIO, label: str) -> None:
        self.to_stderr = stream is not sys.stdout
        self.label = label
        self.active = True

    def request_fields(self, names: Sequence[str]) -> dict[str, str]:
        if not self.active:
            raise PromptError("Prompt session has not been configured")
        values: dict[str, str] = {}
        try:
            for name in names:
                value = typer.prompt(
                    f"{self.label} {name}",
                    default="",
                    show_default=False,
                    hide_input=name == "password",
                    err=self.to_stderr,
                )
                values[name] = value
                if name == "username" and not value:
                    break
        except (click.Abort, EOFError, OSError) as exc:
            raise PromptError(f"Unable to read {', '.join(names)} from terminal") from exc
        return values

    def release(self) -> None:
        self.active = False


@contextmanager
def prompt_session(prompter: Prompter, label: str = DEFAULT_LABEL) -> Iterator[Prompter]:
    """Configure ``prompter`` for stderr and release it on every exit path.

    stdout is pointed at stderr for the whole session, so nothing the prompt
    machinery echoes ends up in piped output.
    """

    stream = sys.stderr
    try:
        prompter.configure(stream, label)
        with redirect_stdout(stream):
            yield prompter
    finally:
        prompter.release()
