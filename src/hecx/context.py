"""Connection state shared by every call against one server."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

PUBLIC = "public"
CREDENTIAL_FIELDS: tuple[str, ...] = ("username", "password")

AuthRules = Mapping[str, Any]


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    def as_basic_auth(self) -> tuple[str, str]:
        return (self.username, self.password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass
class ConnectionContext:
    """Caller-owned connection state.

    ``credentials`` starts out ``None`` and is filled in at most once by an
    interactive call; later calls reuse it without prompting. ``auth_rules``
    is read, never written. The context is not synchronised, so callers that
    share one across threads must serialise their calls.
    """

    url: str
    credentials: Credentials | None = None
    auth_rules: AuthRules | None = None


def lookup_rule(rules: AuthRules, key: str) -> Any:
    """Return the access level stored under ``key``.

    A flat key wins; otherwise dotted keys such as ``stats.get`` walk nested
    mappings. Missing entries return ``None``.
    """

    if key in rules:
        return rules[key]
    node: Any = rules
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def required_credential_fields(
    rules: AuthRules | None,
    rule_key: str,
    credentials: Credentials | None,
    *,
    skip_when_authenticated: bool = True,
) -> tuple[str, ...]:
    """Return the credential fields to prompt for before calling ``rule_key``.

    Unknown rules never prompt. A ``public`` rule never prompts. When
    ``skip_when_authenticated`` is set, existing credentials also suppress the
    prompt.
    """

    if rules is None:
        return ()
    if skip_when_authenticated and credentials is not None:
        return ()
    if lookup_rule(rules, rule_key) == PUBLIC:
        return ()
    return CREDENTIAL_FIELDS
