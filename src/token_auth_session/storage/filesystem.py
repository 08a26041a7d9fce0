"""Filesystem token store.

Persists the token as a single file under a configurable directory,
readable only by the owning user.  Defaults to
``~/.token-auth/<token_key>.token``.

Classes
-------
- FilesystemTokenStore  — one-file token storage
"""
from __future__ import annotations

import asyncio
import os
from pathlib import Path

from token_auth_session.errors import StorageError
from token_auth_session.storage.base import TokenStore

_DEFAULT_STORAGE_DIR: Path = Path.home() / ".token-auth"
_FILE_EXTENSION = ".token"
_FILE_MODE = 0o600


class FilesystemTokenStore(TokenStore):
    """Stores the token in ``<storage_dir>/<token_key>.token``.

    The file is written to a temporary sibling and renamed into place so a
    crash mid-write never leaves a truncated token behind.

    Parameters
    ----------
    storage_dir:
        Directory holding the token file.  Created on first write.
    token_key:
        File stem; lets several applications share one directory.
    """

    def __init__(
        self,
        storage_dir: str | Path | None = None,
        token_key: str = "accessToken",
    ) -> None:
        self._storage_dir: Path = (
            Path(storage_dir) if storage_dir is not None else _DEFAULT_STORAGE_DIR
        )
        # Guard against path traversal through the key.
        self._path: Path = self._storage_dir / f"{os.path.basename(token_key)}{_FILE_EXTENSION}"

    @property
    def path(self) -> Path:
        """Location of the token file."""
        return self._path

    async def read(self) -> str | None:
        """Return the token from disk, or None if the file is absent or empty."""
        return await asyncio.to_thread(self._read_sync)

    async def write(self, token: str) -> None:
        """Atomically replace the token file with ``token``."""
        await asyncio.to_thread(self._write_sync, token)

    async def clear(self) -> None:
        """Delete the token file if it exists."""
        await asyncio.to_thread(self._clear_sync)

    # ------------------------------------------------------------------
    # Blocking helpers, run off the event loop
    # ------------------------------------------------------------------

    def _read_sync(self) -> str | None:
        try:
            with open(self._path, encoding="utf-8", newline="") as handle:
                token = handle.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError("read", str(exc)) from exc
        return token or None

    def _write_sync(self, token: str) -> None:
        tmp_path = self._path.with_suffix(f"{_FILE_EXTENSION}.tmp")
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(token)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageError("write", str(exc)) from exc

    def _clear_sync(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError("clear", str(exc)) from exc

    def __repr__(self) -> str:
        return f"FilesystemTokenStore(path={str(self._path)!r})"


__all__ = ["FilesystemTokenStore"]
