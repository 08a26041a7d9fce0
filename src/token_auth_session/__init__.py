"""token-auth-session — client-side token authentication session state.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import token_auth_session
>>> token_auth_session.__version__
'0.1.0'
"""
from __future__ import annotations

# Errors
from token_auth_session.errors import (
    AuthenticationRejected,
    IdentityServiceError,
    InvalidCredentialsError,
    StorageError,
    TokenAuthError,
)

# Session core
from token_auth_session.session.actions import (
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

# Collaborators
from token_auth_session.identity.base import IdentityClient
from token_auth_session.identity.http import HttpIdentityClient
from token_auth_session.navigation import CallbackNavigator, LoggingNavigator, Navigator
from token_auth_session.storage.base import TokenStore
from token_auth_session.storage.filesystem import FilesystemTokenStore
from token_auth_session.storage.memory import InMemoryTokenStore

# Configuration
from token_auth_session.config import AuthSessionConfig, make_identity_client, make_token_store

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Errors
    "AuthenticationRejected",
    "IdentityServiceError",
    "InvalidCredentialsError",
    "StorageError",
    "TokenAuthError",
    # Session core
    "INITIAL_STATE",
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
    # Collaborators
    "CallbackNavigator",
    "FilesystemTokenStore",
    "HttpIdentityClient",
    "IdentityClient",
    "InMemoryTokenStore",
    "LoggingNavigator",
    "Navigator",
    "TokenStore",
    # Configuration
    "AuthSessionConfig",
    "make_identity_client",
    "make_token_store",
]
