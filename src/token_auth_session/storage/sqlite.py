"""Async SQLite token store — requires aiosqlite (guarded import).

Tokens live in a small key/value table so several applications can share
one database file, each under its own ``token_key``.

Classes
-------
- AsyncSQLiteTokenStore  — aiosqlite-backed token storage
"""
from __future__ import annotations

from pathlib import Path

from token_auth_session.errors import StorageError
from token_auth_session.storage.base import TokenStore

_AIOSQLITE_IMPORT_ERROR = (
    "AsyncSQLiteTokenStore requires the 'aiosqlite' package. "
    "Install it with: pip install aiosqlite  or  pip install 'token-auth-session[sqlite]'"
)

_DEFAULT_DB_PATH: Path = Path.home() / ".token-auth" / "tokens.db"

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS auth_tokens (
    token_key  TEXT PRIMARY KEY,
    token      TEXT NOT NULL,
    saved_at   TEXT NOT NULL DEFAULT (datetime('now'))
)
"""

_UPSERT_SQL = """
INSERT INTO auth_tokens (token_key, token, saved_at)
VALUES (?, ?, datetime('now'))
ON CONFLICT(token_key) DO UPDATE SET
    token    = excluded.token,
    saved_at = excluded.saved_at
"""


class AsyncSQLiteTokenStore(TokenStore):
    """Persists the token in a local SQLite database using aiosqlite.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Defaults to ``~/.token-auth/tokens.db``.
        The parent directory and table are created on first use.
    token_key:
        Row key under which the token is stored.
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        token_key: str = "accessToken",
    ) -> None:
        try:
            import aiosqlite as _aiosqlite  # noqa: F401
        except ImportError as exc:
            raise ImportError(_AIOSQLITE_IMPORT_ERROR) from exc

        self._db_path: Path = Path(db_path) if db_path is not None else _DEFAULT_DB_PATH
        self._token_key = token_key
        self._schema_initialised = False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _ensure_schema(self) -> None:
        """Create the token table on first use."""
        if self._schema_initialised:
            return
        import aiosqlite

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute(_CREATE_TABLE_SQL)
            await conn.commit()
        self._schema_initialised = True

    # ------------------------------------------------------------------
    # TokenStore interface
    # ------------------------------------------------------------------

    async def read(self) -> str | None:
        """Return the token row for ``token_key``, or None."""
        import aiosqlite

        try:
            await self._ensure_schema()
            async with aiosqlite.connect(str(self._db_path)) as conn:
                async with conn.execute(
                    "SELECT token FROM auth_tokens WHERE token_key = ?",
                    (self._token_key,),
                ) as cursor:
                    row = await cursor.fetchone()
        except (OSError, aiosqlite.Error) as exc:
            raise StorageError("read", str(exc)) from exc
        return None if row is None else str(row[0])

    async def write(self, token: str) -> None:
        """Upsert ``token`` under ``token_key``."""
        import aiosqlite

        try:
            await self._ensure_schema()
            async with aiosqlite.connect(str(self._db_path)) as conn:
                await conn.execute(_UPSERT_SQL, (self._token_key, token))
                await conn.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise StorageError("write", str(exc)) from exc

    async def clear(self) -> None:
        """Delete the row for ``token_key`` if present."""
        import aiosqlite

        try:
            await self._ensure_schema()
            async with aiosqlite.connect(str(self._db_path)) as conn:
                await conn.execute(
                    "DELETE FROM auth_tokens WHERE token_key = ?", (self._token_key,)
                )
                await conn.commit()
        except (OSError, aiosqlite.Error) as exc:
            raise StorageError("clear", str(exc)) from exc

    def __repr__(self) -> str:
        return (
            f"AsyncSQLiteTokenStore(db_path={str(self._db_path)!r}, "
            f"token_key={self._token_key!r})"
        )


__all__ = ["AsyncSQLiteTokenStore"]
