"""Session actions and the reducer that applies them.

Every change to ``SessionState`` is expressed as one of four action
variants and applied through ``reduce``.

Classes
-------
- InitializeAction  — outcome of the startup check
- LoginAction       — successful login
- RegisterAction    — successful registration
- LogoutAction      — session torn down

Functions
---------
- reduce  — total function mapping (state, action) to the next state
"""
from __future__ import annotations

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from token_auth_session.session.state import SessionState, UserProfile

logger = logging.getLogger(__name__)


class InitializeAction(BaseModel):
    """Result of the startup check.

    Parameters
    ----------
    authenticated:
        Whether the persisted token resolved to a profile.
    user:
        The resolved profile, or None.
    """

    kind: Literal["INITIALIZE"] = "INITIALIZE"
    authenticated: bool
    user: UserProfile | None = None

    model_config = ConfigDict(frozen=True)


class LoginAction(BaseModel):
    """A login completed and ``user`` is now signed in."""

    kind: Literal["LOGIN"] = "LOGIN"
    user: UserProfile

    model_config = ConfigDict(frozen=True)


class RegisterAction(BaseModel):
    """An account was created and ``user`` is now signed in."""

    kind: Literal["REGISTER"] = "REGISTER"
    user: UserProfile

    model_config = ConfigDict(frozen=True)


class LogoutAction(BaseModel):
    """The session was torn down."""

    kind: Literal["LOGOUT"] = "LOGOUT"

    model_config = ConfigDict(frozen=True)


Action = Annotated[
    Union[InitializeAction, LoginAction, RegisterAction, LogoutAction],
    Field(discriminator="kind"),
]


def reduce(state: SessionState, action: object) -> SessionState:
    """Return the state that results from applying ``action`` to ``state``.

    Anything that is not one of the four action variants leaves ``state``
    unchanged; no error is raised.

    Parameters
    ----------
    state:
        The current session snapshot.
    action:
        The action to apply.

    Returns
    -------
    SessionState
        A new snapshot, or ``state`` itself for an unrecognised action.
    """
    if isinstance(action, InitializeAction):
        return SessionState(
            initialized=True,
            authenticated=action.authenticated,
            user=action.user,
        )
    if isinstance(action, (LoginAction, RegisterAction)):
        return SessionState(
            initialized=state.initialized,
            authenticated=True,
            user=action.user,
        )
    if isinstance(action, LogoutAction):
        return SessionState(initialized=state.initialized, authenticated=False, user=None)

    logger.debug("reduce: ignoring unrecognised action %r", action)
    return state


__all__ = [
    "Action",
    "InitializeAction",
    "LoginAction",
    "LogoutAction",
    "RegisterAction",
    "reduce",
]
