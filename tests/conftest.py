"""Shared fixtures: a scriptable identity client and a recording navigator."""
from __future__ import annotations

from typing import Any

import pytest

from token_auth_session.errors import AuthenticationRejected
from token_auth_session.identity.base import IdentityClient
from token_auth_session.navigation import Navigator
from token_auth_session.session.machine import AuthSession
from token_auth_session.session.state import RegistrationPayload, UserProfile
from token_auth_session.storage.memory import InMemoryTokenStore


class FakeIdentityClient(IdentityClient):
    """In-process identity service.

    ``tokens`` maps token -> profile dict.  ``credentials`` maps
    identifier -> (secret, token).  Setting ``*_error`` makes the matching
    call raise it.
    """

    def __init__(self) -> None:
        self.tokens: dict[str, dict[str, Any]] = {}
        self.credentials: dict[str, tuple[str, str]] = {}
        self.registration_token: str | None = None
        self.registration_profile: dict[str, Any] | None = None
        self.verify_error: Exception | None = None
        self.create_error: Exception | None = None
        self.profile_error: Exception | None = None
        self.active_token: str | None = None
        self.calls: list[str] = []
        self.closed = False

    async def verify_credentials(self, identifier: str, secret: str) -> str:
        self.calls.append("verify_credentials")
        if self.verify_error is not None:
            raise self.verify_error
        expected = self.credentials.get(identifier)
        if expected is None or expected[0] != secret:
            raise AuthenticationRejected("bad credentials", status_code=400)
        return expected[1]

    async def create_account(self, payload: RegistrationPayload) -> str:
        self.calls.append("create_account")
        if self.create_error is not None:
            raise self.create_error
        assert self.registration_token is not None
        self.tokens[self.registration_token] = self.registration_profile or {
            "email": payload.email
        }
        return self.registration_token

    async def fetch_profile(self) -> UserProfile:
        self.calls.append("fetch_profile")
        if self.profile_error is not None:
            raise self.profile_error
        if self.active_token is None or self.active_token not in self.tokens:
            raise AuthenticationRejected("invalid token", status_code=401)
        return UserProfile.model_validate(self.tokens[self.active_token])

    def use_token(self, token: str | None) -> None:
        self.active_token = token

    async def aclose(self) -> None:
        self.closed = True


class RecordingNavigator(Navigator):
    def __init__(self) -> None:
        self.calls = 0

    def go_to_sign_in(self) -> None:
        self.calls += 1


@pytest.fixture()
def store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture()
def identity() -> FakeIdentityClient:
    return FakeIdentityClient()


@pytest.fixture()
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture()
def session(
    store: InMemoryTokenStore,
    identity: FakeIdentityClient,
    navigator: RecordingNavigator,
) -> AuthSession:
    return AuthSession(store=store, identity=identity, navigator=navigator)
