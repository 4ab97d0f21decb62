from __future__ import annotations

import base64
import binascii
import hashlib
import json
import logging
import os
import stat
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from .context import ConnectionContext, Credentials
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:8000"
_FERNET_SALT = b"hecx-config"
_SENSITIVE_KEYS = ("password",)


def hecx_dir() -> Path:
    return Path(os.path.expanduser(os.getenv("HECX_HOME", "~/.hecx")))


def default_config_path() -> Path:
    return hecx_dir() / "config.json"


def _derive_fernet_key(raw: str) -> bytes | None:
    """Return a urlsafe base64 Fernet key derived from ``raw``."""

    normalized = raw.strip().encode("utf-8")
    if not normalized:
        return None

    try:
        decoded = base64.urlsafe_b64decode(normalized)
    except (binascii.Error, ValueError):
        decoded = b""

    if len(decoded) == 32:
        return normalized

    return base64.urlsafe_b64encode(
        hashlib.pbkdf2_hmac("sha256", normalized, _FERNET_SALT, 390_000, dklen=32)
    )


def _get_cipher() -> Fernet | None:
    key = os.getenv("HECX_CONFIG_ENCRYPTION_KEY")
    if not key:
        return None
    derived = _derive_fernet_key(key)
    if not derived:
        logger.warning("HECX_CONFIG_ENCRYPTION_KEY is empty; storing config in plaintext.")
        return None
    return Fernet(derived)


def encrypt_field(value: str | None) -> str | None:
    """Encrypt ``value`` when an encryption key is configured."""

    if not value:
        return value
    cipher = _get_cipher()
    if cipher is None:
        return value
    token = cipher.encrypt(value.encode("utf-8"))
    return f"enc:{token.decode('utf-8')}"


def decrypt_field(value: str | None) -> str | None:
    """Decrypt ``value`` produced by :func:`encrypt_field`."""

    if not value or not value.startswith("enc:"):
        return value

    cipher = _get_cipher()
    if cipher is None:
        raise ConfigError(
            "Encrypted hecx configuration detected but HECX_CONFIG_ENCRYPTION_KEY is not set."
        )
    try:
        decrypted = cipher.decrypt(value[4:].encode("utf-8"))
    except InvalidToken as exc:
        raise ConfigError("Unable to decrypt hecx configuration; verify encryption key.") from exc
    return decrypted.decode("utf-8")


def _secure_path(path: Path) -> None:
    if not path.is_file() or os.name == "nt":
        return
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
        if mode & (stat.S_IRWXG | stat.S_IRWXO):
            logger.warning("Config file %s is group or world accessible; resetting to 0o600.", path)
        path.chmod(0o600)
    except PermissionError as exc:
        logger.warning("Unable to enforce secure permissions for %s: %s", path, exc)


@dataclass
class ConfigData:
    url: str | None = None
    username: str | None = None
    password: str | None = None
    auth_rules: dict[str, Any] | None = field(default=None)


class ConfigStore:
    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path else default_config_path()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        _secure_path(self.path)
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Config file {self.path} is not valid JSON: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Unable to read config file {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {self.path} must contain a JSON object")
        for key in _SENSITIVE_KEYS:
            if isinstance(raw.get(key), str):
                raw[key] = decrypt_field(raw[key])
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        payload = dict(data)
        for key in _SENSITIVE_KEYS:
            if isinstance(payload.get(key), str):
                payload[key] = encrypt_field(payload[key])
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        tmp.replace(self.path)
        _secure_path(self.path)

    def load(self) -> ConfigData:
        raw = self._read()
        rules = raw.get("auth_rules")
        if rules is not None and not isinstance(rules, dict):
            raise ConfigError("auth_rules must be a JSON object")
        return ConfigData(
            url=raw.get("url"),
            username=raw.get("username"),
            password=raw.get("password"),
            auth_rules=rules,
        )

    def save(self, cfg: ConfigData) -> None:
        data = {
            "url": cfg.url,
            "username": cfg.username,
            "password": cfg.password,
            "auth_rules": cfg.auth_rules,
        }
        self._write({k: v for k, v in data.items() if v is not None})


def build_context(
    *,
    url: str | None = None,
    username: str | None = None,
    password: str | None = None,
    auth_rules: Mapping[str, Any] | None = None,
    config: ConfigData | None = None,
) -> ConnectionContext:
    """Build a :class:`ConnectionContext` from explicit values, env and config.

    Precedence per value is explicit argument, then ``HECATE_URL`` /
    ``HECATE_USERNAME`` / ``HECATE_PASSWORD``, then the config file. The URL
    falls back to :data:`DEFAULT_URL`.
    """

    cfg = config or ConfigData()
    resolved_url = url or os.getenv("HECATE_URL") or cfg.url or DEFAULT_URL
    resolved_user = username or os.getenv("HECATE_USERNAME") or cfg.username
    resolved_password = password or os.getenv("HECATE_PASSWORD") or cfg.password or ""
    credentials = Credentials(resolved_user, resolved_password) if resolved_user else None
    rules = auth_rules if auth_rules is not None else cfg.auth_rules
    return ConnectionContext(url=resolved_url, credentials=credentials, auth_rules=rules)
