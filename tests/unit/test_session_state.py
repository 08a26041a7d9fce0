"""Unit tests for token_auth_session.session.state."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from token_auth_session.session.state import (
    INITIAL_STATE,
    RegistrationPayload,
    SessionState,
    SessionStatus,
    UserProfile,
)


class TestUserProfile:
    def test_extra_fields_are_kept(self) -> None:
        profile = UserProfile.model_validate({"id": 1, "email": "a@example.com", "role": "admin"})
        assert profile.role == "admin"  # type: ignore[attr-defined]
        assert profile.to_dict() == {"id": 1, "email": "a@example.com", "role": "admin"}

    def test_to_dict_omits_unsupplied_fields(self) -> None:
        profile = UserProfile(id="u-1")
        assert profile.to_dict() == {"id": "u-1"}

    def test_is_frozen(self) -> None:
        profile = UserProfile(id=1)
        with pytest.raises(ValidationError):
            profile.id = 2  # type: ignore[misc]


class TestRegistrationPayload:
    def test_requires_email_and_password(self) -> None:
        with pytest.raises(ValidationError):
            RegistrationPayload.model_validate({"email": "a@example.com"})

    def test_extra_fields_forwarded(self) -> None:
        payload = RegistrationPayload.model_validate(
            {"email": "a@example.com", "password": "pw", "first_name": "Ana"}
        )
        assert payload.model_dump() == {
            "email": "a@example.com",
            "password": "pw",
            "first_name": "Ana",
        }


class TestSessionState:
    def test_initial_state(self) -> None:
        assert INITIAL_STATE == SessionState(initialized=False, authenticated=False, user=None)
        assert INITIAL_STATE.status is SessionStatus.UNINITIALIZED

    def test_authenticated_requires_user(self) -> None:
        with pytest.raises(ValidationError, match="requires a user profile"):
            SessionState(initialized=True, authenticated=True, user=None)

    def test_unauthenticated_rejects_user(self) -> None:
        with pytest.raises(ValidationError, match="cannot carry a user profile"):
            SessionState(initialized=True, authenticated=False, user=UserProfile(id=1))

    def test_is_frozen(self) -> None:
        state = SessionState()
        with pytest.raises(ValidationError):
            state.authenticated = True  # type: ignore[misc]

    @pytest.mark.parametrize(
        "initialized,authenticated,expected",
        [
            (False, False, SessionStatus.UNINITIALIZED),
            (True, False, SessionStatus.UNAUTHENTICATED),
            (True, True, SessionStatus.AUTHENTICATED),
            (False, True, SessionStatus.AUTHENTICATED),
        ],
    )
    def test_status(self, initialized: bool, authenticated: bool, expected: SessionStatus) -> None:
        user = UserProfile(id=1) if authenticated else None
        state = SessionState(initialized=initialized, authenticated=authenticated, user=user)
        assert state.status is expected

    def test_status_enum_values(self) -> None:
        assert SessionStatus.AUTHENTICATED.value == "authenticated"
        assert SessionStatus("unauthenticated") is SessionStatus.UNAUTHENTICATED
