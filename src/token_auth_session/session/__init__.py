"""Session state, actions and lifecycle management."""
from __future__ import annotations

from token_auth_session.session.actions import (
    Action,
    InitializeAction,
    LoginAction,
    LogoutAction,
    RegisterAction,
    reduce,
)
from token_auth_session.session.machine import AuthSession, open_session
from token_auth_session.session.state import (
    INITIAL_STATE,
    RegistrationPayload,
    SessionState,
    SessionStatus,
    UserProfile,
)

__all__ = [
    "INITIAL_STATE",
    "Action",
    "AuthSession",
    "InitializeAction",
    "LoginAction",
    "LogoutAction",
    "RegisterAction",
    "RegistrationPayload",
    "SessionState",
    "SessionStatus",
    "UserProfile",
    "open_session",
    "reduce",
]
