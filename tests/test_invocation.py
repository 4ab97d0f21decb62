from __future__ import annotations

import pytest

from hecx.models.invocation import InvocationMode, InvocationOptions, select_mode


@pytest.mark.parametrize(
    "options",
    [None, {}, {"programmatic": True}, {"verbose": True}, {"scripted": "maybe"}, "script", 42],
)
def test_unrecognised_options_default_to_programmatic(options) -> None:
    assert select_mode(options) is InvocationMode.PROGRAMMATIC


def test_scripted_wins_over_interactive() -> None:
    assert select_mode({"scripted": True, "interactive": True}) is InvocationMode.SCRIPTED


def test_interactive_selected() -> None:
    assert select_mode({"interactive": True}) is InvocationMode.INTERACTIVE


def test_legacy_flag_names() -> None:
    assert select_mode({"script": True}) is InvocationMode.SCRIPTED
    assert select_mode({"cli": True}) is InvocationMode.INTERACTIVE


def test_model_instance_is_accepted() -> None:
    options = InvocationOptions(interactive=True)
    assert select_mode(options) is InvocationMode.INTERACTIVE
    assert InvocationOptions().mode is InvocationMode.PROGRAMMATIC


def test_unreadable_sibling_flag_does_not_hide_valid_flag() -> None:
    assert select_mode({"scripted": True, "interactive": "maybe"}) is InvocationMode.SCRIPTED
    assert select_mode({"scripted": "maybe", "interactive": True}) is InvocationMode.INTERACTIVE
    assert select_mode({"scripted": None, "cli": "yes"}) is InvocationMode.INTERACTIVE
