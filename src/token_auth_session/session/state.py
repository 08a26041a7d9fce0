"""Session state domain models.

All types are Pydantic BaseModel subclasses so that profiles returned by
the identity service are validated on the way in and the session snapshot
can be dumped to JSON for observers.

Classes
-------
- SessionStatus        — enum for the three lifecycle states
- UserProfile          — profile of the signed-in user
- RegistrationPayload  — account-creation request body
- SessionState         — immutable snapshot of the authentication session
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class SessionStatus(str, Enum):
    """Lifecycle states of the authentication session."""

    UNINITIALIZED = "uninitialized"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class UserProfile(BaseModel):
    """The current user's profile as returned by the identity service.

    Only ``id``, ``email`` and ``name`` are typed; every other field the
    service returns is kept verbatim and is reachable as an attribute.

    Parameters
    ----------
    id:
        Identity-service user identifier.
    email:
        Primary e-mail address.
    name:
        Display name.
    """

    id: int | str | None = None
    email: str | None = None
    name: str | None = None

    model_config = ConfigDict(extra="allow", frozen=True)

    def to_dict(self) -> dict[str, Any]:
        """Return only the fields the identity service actually supplied."""
        return self.model_dump(mode="json", exclude_unset=True)


class RegistrationPayload(BaseModel):
    """Request body for creating an account.

    ``email`` and ``password`` are required; any additional fields the
    identity service expects (first name, organisation, ...) are accepted
    and forwarded unchanged.
    """

    email: str
    password: str

    model_config = ConfigDict(extra="allow")


class SessionState(BaseModel):
    """Snapshot of the client-side authentication session.

    Instances are frozen: each transition produces a new ``SessionState``.

    Parameters
    ----------
    initialized:
        True once the startup check has completed, successfully or not.
    authenticated:
        True iff a verified session currently exists.
    user:
        Profile of the signed-in user; present iff ``authenticated``.

    Raises
    ------
    pydantic.ValidationError
        If ``authenticated`` and ``user`` disagree.
    """

    initialized: bool = False
    authenticated: bool = False
    user: UserProfile | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_user_matches_authenticated(self) -> SessionState:
        if self.authenticated and self.user is None:
            raise ValueError("an authenticated session requires a user profile")
        if not self.authenticated and self.user is not None:
            raise ValueError("an unauthenticated session cannot carry a user profile")
        return self

    @property
    def status(self) -> SessionStatus:
        """Return the lifecycle state this snapshot represents."""
        if self.authenticated:
            return SessionStatus.AUTHENTICATED
        if not self.initialized:
            return SessionStatus.UNINITIALIZED
        return SessionStatus.UNAUTHENTICATED


INITIAL_STATE: SessionState = SessionState(initialized=False, authenticated=False, user=None)

__all__ = [
    "INITIAL_STATE",
    "RegistrationPayload",
    "SessionState",
    "SessionStatus",
    "UserProfile",
]
