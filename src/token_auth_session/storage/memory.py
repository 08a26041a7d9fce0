"""In-memory token store.

Keeps the token in a plain attribute guarded by ``asyncio.Lock``.  The
token is lost when the process exits, so this store is mainly useful for
tests and short-lived scripts.

Classes
-------
- InMemoryTokenStore  — ephemeral process-local store
"""
from __future__ import annotations

import asyncio

from token_auth_session.storage.base import TokenStore


class InMemoryTokenStore(TokenStore):
    """Ephemeral token store.

    Parameters
    ----------
    initial_token:
        Optional token to pre-populate the store with.
    """

    def __init__(self, initial_token: str | None = None) -> None:
        self._token: str | None = initial_token
        self._lock: asyncio.Lock = asyncio.Lock()

    async def read(self) -> str | None:
        """Return the stored token, or None."""
        async with self._lock:
            return self._token

    async def write(self, token: str) -> None:
        """Replace the stored token with ``token``."""
        async with self._lock:
            self._token = token

    async def clear(self) -> None:
        """Forget the stored token."""
        async with self._lock:
            self._token = None

    @property
    def token(self) -> str | None:
        """The currently stored token (synchronous peek, for tests)."""
        return self._token

    def __repr__(self) -> str:
        return f"InMemoryTokenStore(has_token={self._token is not None})"


__all__ = ["InMemoryTokenStore"]
