"""Async Redis token store — requires redis[asyncio] (guarded import).

Classes
-------
- AsyncRedisTokenStore  — redis.asyncio-backed token storage
"""
from __future__ import annotations

from token_auth_session.errors import StorageError
from token_auth_session.storage.base import TokenStore

_REDIS_IMPORT_ERROR = (
    "AsyncRedisTokenStore requires the 'redis' package with asyncio support. "
    "Install it with: pip install redis  or  "
    "pip install 'token-auth-session[redis]'"
)


class AsyncRedisTokenStore(TokenStore):
    """Persists the token as a Redis string under ``<key_prefix><token_key>``.

    Parameters
    ----------
    url:
        Redis connection URL.  Defaults to ``"redis://localhost:6379/0"``.
    token_key:
        Key suffix identifying this application's token.
    key_prefix:
        String prepended to the key.  Defaults to ``"token_auth:"``.
    ttl_seconds:
        Optional expiry applied on every write.  When None the token
        persists until cleared.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        token_key: str = "accessToken",
        key_prefix: str = "token_auth:",
        ttl_seconds: int | None = None,
    ) -> None:
        try:
            import redis.asyncio as redis_asyncio
        except ImportError as exc:
            raise ImportError(_REDIS_IMPORT_ERROR) from exc

        self._client = redis_asyncio.Redis.from_url(url, decode_responses=True)
        self._key = f"{key_prefix}{token_key}"
        self._ttl_seconds = ttl_seconds

    async def read(self) -> str | None:
        """Return the stored token, or None if the key is absent."""
        try:
            value = await self._client.get(self._key)
        except Exception as exc:  # noqa: BLE001 — redis raises many error types
            raise StorageError("read", str(exc)) from exc
        return None if value is None else str(value)

    async def write(self, token: str) -> None:
        """Set the key to ``token``, applying the TTL when configured."""
        try:
            if self._ttl_seconds is not None:
                await self._client.setex(self._key, self._ttl_seconds, token)
            else:
                await self._client.set(self._key, token)
        except Exception as exc:  # noqa: BLE001
            raise StorageError("write", str(exc)) from exc

    async def clear(self) -> None:
        """Delete the key."""
        try:
            await self._client.delete(self._key)
        except Exception as exc:  # noqa: BLE001
            raise StorageError("clear", str(exc)) from exc

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"AsyncRedisTokenStore(key={self._key!r}, ttl_seconds={self._ttl_seconds!r})"


__all__ = ["AsyncRedisTokenStore"]
