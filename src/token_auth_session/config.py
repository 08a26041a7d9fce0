"""Configuration for token-auth-session.

Settings are layered: built-in defaults, then an optional YAML file, then
``TOKEN_AUTH_*`` environment variables.  The CLI applies its own options
on top.

Classes
-------
- AuthSessionConfig  — validated settings model

Functions
---------
- make_token_store      — build the configured ``TokenStore``
- make_identity_client  — build the configured ``HttpIdentityClient``
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, Field

from token_auth_session.identity.http import HttpIdentityClient
from token_auth_session.navigation import DEFAULT_SIGN_IN_PATH
from token_auth_session.storage.base import TokenStore

ENV_PREFIX = "TOKEN_AUTH_"

StorageKind = Literal["memory", "filesystem", "sqlite", "redis"]


class AuthSessionConfig(BaseModel):
    """Validated settings for building an ``AuthSession``.

    Parameters
    ----------
    base_url:
        Root URL of the identity service.
    login_path, register_path, profile_path:
        Identity service endpoints, relative to ``base_url``.
    timeout_seconds:
        HTTP timeout; None disables it.
    storage:
        Token store backend.
    storage_dir:
        Directory for the filesystem store (default ``~/.token-auth``).
    db_path:
        SQLite file for the sqlite store.
    redis_url:
        Connection URL for the redis store.
    token_key:
        Name under which the token is stored.
    encryption_key:
        Base64-encoded 32-byte key.  When set, the token is encrypted at
        rest with AES-256-GCM.
    sign_in_path:
        Route handed to the navigator after logout.
    """

    base_url: str = "http://localhost:8000"
    login_path: str = "/auth/login/"
    register_path: str = "/auth/register/"
    profile_path: str = "/auth/me/"
    timeout_seconds: float | None = Field(default=30.0, gt=0)
    storage: StorageKind = "filesystem"
    storage_dir: Path | None = None
    db_path: Path | None = None
    redis_url: str = "redis://localhost:6379/0"
    token_key: str = "accessToken"
    encryption_key: str | None = Field(default=None, repr=False)
    sign_in_path: str = DEFAULT_SIGN_IN_PATH

    model_config = {"frozen": True, "extra": "forbid"}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> AuthSessionConfig:
        """Load settings from a YAML mapping.

        Raises
        ------
        ValueError
            If the document is not a mapping.
        pydantic.ValidationError
            If a value is invalid or a key is unknown.
        """
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping at top level")
        return cls.model_validate(raw)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        base: AuthSessionConfig | None = None,
    ) -> AuthSessionConfig:
        """Overlay ``TOKEN_AUTH_<FIELD>`` environment variables on ``base``.

        An empty ``TOKEN_AUTH_TIMEOUT_SECONDS`` disables the timeout.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = (base or cls()).model_dump()
        for name in cls.model_fields:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in env:
                value: str | None = env[key]
                if name == "timeout_seconds" and value == "":
                    value = None
                values[name] = value
        return cls.model_validate(values)

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> AuthSessionConfig:
        """Return defaults, overlaid by the YAML file (if any), then the env."""
        base = cls.from_yaml(path) if path is not None else cls()
        return cls.from_env(environ, base=base)

    def with_overrides(self, **overrides: Any) -> AuthSessionConfig:
        """Return a copy with every non-None override applied and validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).model_validate(values)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_token_store(config: AuthSessionConfig) -> TokenStore:
    """Instantiate the token store described by ``config``."""
    store: TokenStore
    if config.storage == "memory":
        from token_auth_session.storage.memory import InMemoryTokenStore

        store = InMemoryTokenStore()
    elif config.storage == "filesystem":
        from token_auth_session.storage.filesystem import FilesystemTokenStore

        store = FilesystemTokenStore(config.storage_dir, token_key=config.token_key)
    elif config.storage == "sqlite":
        from token_auth_session.storage.sqlite import AsyncSQLiteTokenStore

        store = AsyncSQLiteTokenStore(config.db_path, token_key=config.token_key)
    else:
        from token_auth_session.storage.redis import AsyncRedisTokenStore

        store = AsyncRedisTokenStore(config.redis_url, token_key=config.token_key)

    if config.encryption_key:
        from token_auth_session.storage.encrypted import EncryptedTokenStore

        key = EncryptedTokenStore.decode_key(config.encryption_key)
        store = EncryptedTokenStore(store, key, associated_data=config.token_key.encode())
    return store


def make_identity_client(config: AuthSessionConfig) -> HttpIdentityClient:
    """Instantiate the HTTP identity client described by ``config``."""
    return HttpIdentityClient(
        config.base_url,
        login_path=config.login_path,
        register_path=config.register_path,
        profile_path=config.profile_path,
        timeout_seconds=config.timeout_seconds,
    )


__all__ = [
    "ENV_PREFIX",
    "AuthSessionConfig",
    "make_identity_client",
    "make_token_store",
]
