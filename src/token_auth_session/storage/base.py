"""Abstract base class for credential token stores.

A token store persists exactly one opaque credential token so that a
session survives a process restart.

Classes
-------
- TokenStore  — abstract base for all token stores
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class TokenStore(ABC):
    """Protocol for reading, writing and clearing the persisted token.

    All methods are coroutines.  Implementations must be consistent within
    a process: ``read`` awaited right after ``write`` in the same task
    returns the written token.

    Every method raises ``StorageError`` when the underlying medium fails.
    """

    @abstractmethod
    async def read(self) -> str | None:
        """Return the persisted token, or None if no token is stored.

        Raises
        ------
        StorageError
            If the medium cannot be read.
        """

    @abstractmethod
    async def write(self, token: str) -> None:
        """Persist ``token``, replacing any previously stored token.

        Parameters
        ----------
        token:
            Opaque credential issued by the identity service.

        Raises
        ------
        StorageError
            If the token could not be durably written.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Remove the persisted token.

        Clearing an empty store is not an error.

        Raises
        ------
        StorageError
            If the medium cannot be modified.
        """

    async def aclose(self) -> None:
        """Release any connection held by the store.  No-op by default."""


__all__ = ["TokenStore"]
