"""AES-256-GCM encryption layer over any token store.

The ``cryptography`` package is a soft dependency; a helpful
``ImportError`` is raised when it is absent so that callers who do not
need encryption pay no installation cost.

Classes
-------
EncryptedTokenStore
    Wraps another ``TokenStore`` and stores only ciphertext in it.

Wire format
-----------
The wrapped store receives ``v1:<urlsafe-base64(nonce || ciphertext)>``
where ``ciphertext`` includes the 16-byte GCM authentication tag.
"""
from __future__ import annotations

import base64
import binascii
import os

from token_auth_session.errors import StorageError
from token_auth_session.storage.base import TokenStore

try:
    from cryptography.exceptions import InvalidTag
    from cryptography.hazmat.primitives.ciphers.aead import AESGCM

    _CRYPTO_AVAILABLE = True
except ImportError:  # pragma: no cover — only missing when cryptography absent
    _CRYPTO_AVAILABLE = False


_NONCE_LENGTH: int = 12  # 96-bit nonce per NIST SP 800-38D
_KEY_LENGTH: int = 32  # 256-bit key for AES-256
_VERSION_PREFIX: str = "v1:"


class EncryptedTokenStore(TokenStore):
    """Encrypts the token before handing it to ``inner``.

    Parameters
    ----------
    inner:
        The store that persists the encrypted token.
    key:
        Exactly 32 bytes of key material.  Use :meth:`generate_key` to
        create one.
    associated_data:
        Optional bytes bound to every ciphertext (for example an
        application id) so a token cannot be replayed into another app.

    Raises
    ------
    ImportError
        If the ``cryptography`` package is not installed.
    ValueError
        If *key* is not exactly 32 bytes.
    """

    def __init__(
        self,
        inner: TokenStore,
        key: bytes,
        associated_data: bytes | None = None,
    ) -> None:
        if not _CRYPTO_AVAILABLE:
            raise ImportError(  # pragma: no cover
                "Install cryptography>=41.0: pip install 'token-auth-session[crypto]'"
            )
        if len(key) != _KEY_LENGTH:
            raise ValueError(
                f"Key must be {_KEY_LENGTH} bytes (AES-256), got {len(key)}"
            )
        self._inner = inner
        self._aesgcm = AESGCM(key)
        self._associated_data = associated_data

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------

    @staticmethod
    def generate_key() -> bytes:
        """Return 32 bytes of cryptographically random key material."""
        return os.urandom(_KEY_LENGTH)

    @staticmethod
    def decode_key(encoded: str) -> bytes:
        """Decode a base64 (standard or URL-safe) key string.

        Raises
        ------
        ValueError
            If ``encoded`` is not valid base64.
        """
        try:
            return base64.urlsafe_b64decode(encoded.replace("+", "-").replace("/", "_"))
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Encryption key is not valid base64: {exc}") from exc

    # ------------------------------------------------------------------
    # TokenStore interface
    # ------------------------------------------------------------------

    async def read(self) -> str | None:
        """Read and decrypt the token.

        Raises
        ------
        StorageError
            If the stored value is not in the expected format or fails
            authentication (tampered, or written with another key).
        """
        stored = await self._inner.read()
        if stored is None:
            return None
        if not stored.startswith(_VERSION_PREFIX):
            raise StorageError("read", "stored token is not in encrypted format")
        try:
            blob = base64.urlsafe_b64decode(stored[len(_VERSION_PREFIX):])
            nonce, ciphertext = blob[:_NONCE_LENGTH], blob[_NONCE_LENGTH:]
            plaintext = self._aesgcm.decrypt(nonce, ciphertext, self._associated_data)
        except (binascii.Error, ValueError, InvalidTag) as exc:
            raise StorageError("read", f"cannot decrypt stored token ({type(exc).__name__})") from exc
        return plaintext.decode("utf-8")

    async def write(self, token: str) -> None:
        """Encrypt ``token`` with a fresh nonce and write it to ``inner``."""
        nonce = os.urandom(_NONCE_LENGTH)
        ciphertext = self._aesgcm.encrypt(nonce, token.encode("utf-8"), self._associated_data)
        encoded = base64.urlsafe_b64encode(nonce + ciphertext).decode("ascii")
        await self._inner.write(f"{_VERSION_PREFIX}{encoded}")

    async def clear(self) -> None:
        """Clear ``inner``."""
        await self._inner.clear()

    async def aclose(self) -> None:
        await self._inner.aclose()

    def __repr__(self) -> str:
        return f"EncryptedTokenStore(inner={self._inner!r})"


__all__ = ["EncryptedTokenStore"]
