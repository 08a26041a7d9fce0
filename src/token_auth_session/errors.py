"""Exception hierarchy for token-auth-session.

Classes
-------
- TokenAuthError           — root of every error raised by this package
- StorageError             — token store read/write/clear failure
- IdentityServiceError     — identity service unreachable or misbehaving
- AuthenticationRejected   — identity service refused the credentials/token
- InvalidCredentialsError  — normalized error surfaced by ``AuthSession.login``
"""
from __future__ import annotations

import json
from typing import Any


class TokenAuthError(Exception):
    """Base class for all token-auth-session errors."""


class StorageError(TokenAuthError):
    """Raised when a token store cannot read, write, or clear the token.

    Parameters
    ----------
    operation:
        The store operation that failed: ``"read"``, ``"write"``, or
        ``"clear"``.
    detail:
        Human-readable description of the underlying failure.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"Token store {operation} failed: {detail}")


class IdentityServiceError(TokenAuthError):
    """Raised when the identity service call fails.

    Covers connectivity failures, unexpected HTTP statuses and malformed
    response bodies.

    Parameters
    ----------
    message:
        Description of the failure.
    status_code:
        HTTP status returned by the service, when one was received.
    detail:
        Error body returned by the service: the decoded JSON value, or the
        raw text when the body is not JSON.  Appended to the message.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        if detail is not None and detail != "":
            rendered = detail if isinstance(detail, str) else json.dumps(detail)
            message = f"{message}: {rendered}"
        super().__init__(message)


class AuthenticationRejected(IdentityServiceError):
    """The identity service rejected the supplied credentials or token."""


class InvalidCredentialsError(TokenAuthError):
    """Normalized login failure.

    Raised by ``AuthSession.login`` regardless of the underlying cause so
    that callers cannot tell a wrong password from an unreachable service.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


__all__ = [
    "AuthenticationRejected",
    "IdentityServiceError",
    "InvalidCredentialsError",
    "StorageError",
    "TokenAuthError",
]
