"""Token store subpackage.

All stores implement the async ``TokenStore`` ABC.  Optional stores guard
their third-party imports so that the package remains installable without
those extras.

Public surface
--------------
- TokenStore             — abstract base class
- InMemoryTokenStore     — process-local store (useful for testing)
- FilesystemTokenStore   — token kept in a user-only file
- AsyncSQLiteTokenStore  — aiosqlite store (requires aiosqlite)
- AsyncRedisTokenStore   — redis.asyncio store (requires redis>=5)
- EncryptedTokenStore    — AES-256-GCM wrapper (requires cryptography)
"""
from __future__ import annotations

from token_auth_session.storage.base import TokenStore
from token_auth_session.storage.filesystem import FilesystemTokenStore
from token_auth_session.storage.memory import InMemoryTokenStore

__all__ = [
    "FilesystemTokenStore",
    "InMemoryTokenStore",
    "TokenStore",
]

# AsyncSQLiteTokenStore — guarded by the aiosqlite dependency
try:
    from token_auth_session.storage.sqlite import AsyncSQLiteTokenStore

    __all__ = [*__all__, "AsyncSQLiteTokenStore"]
except ImportError:
    pass

# AsyncRedisTokenStore — guarded by the redis[asyncio] dependency
try:
    from token_auth_session.storage.redis import AsyncRedisTokenStore

    __all__ = [*__all__, "AsyncRedisTokenStore"]
except ImportError:
    pass

# EncryptedTokenStore — guarded by the cryptography dependency
try:
    from token_auth_session.storage.encrypted import EncryptedTokenStore

    __all__ = [*__all__, "EncryptedTokenStore"]
except ImportError:
    pass
