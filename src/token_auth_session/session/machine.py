"""Authentication session lifecycle.

Provides ``AuthSession``, the owner of the client-side ``SessionState``.
It coordinates the token store and the identity service and applies every
state change through ``reduce``.

Classes
-------
- AuthSession  — state container plus the initialize/login/register/logout
  transitions

Functions
---------
- open_session  — build an ``AuthSession`` and run its startup check
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any, Callable, ClassVar

from token_auth_session.errors import InvalidCredentialsError, StorageError
from token_auth_session.identity.base import IdentityClient
from token_auth_session.navigation import LoggingNavigator, Navigator
from token_auth_session.session.actions import (
    InitializeAction,
    LoginAction,
    LogoutAction,
    RegisterAction,
    reduce,
)
from token_auth_session.session.state import (
    INITIAL_STATE,
    RegistrationPayload,
    SessionState,
    UserProfile,
)
from token_auth_session.storage.base import TokenStore

logger = logging.getLogger(__name__)

Observer = Callable[[SessionState], object]


class AuthSession:
    """Owns the authentication state and the transitions that change it.

    The startup check runs once, automatically, when the session is
    entered as an async context manager (or built through
    ``open_session``).  Transitions are not serialised against each other:
    when two overlap, whichever dispatches last determines the state.

    Parameters
    ----------
    store:
        Where the credential token is persisted between runs.
    identity:
        Client for the remote identity service.
    navigator:
        Notified once per logout.  Defaults to a ``LoggingNavigator``.
    """

    method: ClassVar[str] = "Token"

    def __init__(
        self,
        store: TokenStore,
        identity: IdentityClient,
        navigator: Navigator | None = None,
    ) -> None:
        self._store = store
        self._identity = identity
        self._navigator = navigator or LoggingNavigator()
        self._state: SessionState = INITIAL_STATE
        self._observers: list[Observer] = []
        self._lock = threading.RLock()
        self._initialize_started = False

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """The current session snapshot."""
        with self._lock:
            return self._state

    def get_state(self) -> SessionState:
        """Return the current session snapshot."""
        return self.state

    @property
    def is_initialized(self) -> bool:
        return self.state.initialized

    @property
    def is_authenticated(self) -> bool:
        return self.state.authenticated

    @property
    def user(self) -> UserProfile | None:
        return self.state.user

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer(state)`` after every state change.

        Parameters
        ----------
        observer:
            Callable receiving the new ``SessionState``.  Exceptions it
            raises are logged and otherwise ignored.

        Returns
        -------
        Callable[[], None]
            Function that removes the subscription; safe to call twice.
        """
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _dispatch(self, action: object) -> SessionState:
        """Apply ``action`` through ``reduce`` and notify observers."""
        with self._lock:
            previous = self._state
            self._state = reduce(previous, action)
            if self._state is previous:
                return previous
            logger.debug(
                "AuthSession: %s -> %s", previous.status.value, self._state.status.value
            )
            for observer in list(self._observers):
                try:
                    observer(self._state)
                except Exception:  # noqa: BLE001 — one observer must not break the others
                    logger.exception("AuthSession: observer %r raised", observer)
            return self._state

    # ------------------------------------------------------------------
    # Token bookkeeping
    # ------------------------------------------------------------------

    async def _set_session(self, token: str) -> None:
        await self._store.write(token)
        self._identity.use_token(token)

    async def _reset_session(self) -> None:
        self._identity.use_token(None)
        try:
            await self._store.clear()
        except StorageError as exc:
            logger.warning("AuthSession: could not clear stored token: %s", exc)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def initialize(self) -> SessionState:
        """Resolve the persisted token into a session.

        Runs once per ``AuthSession``; later calls return the current state
        without doing anything.  Never raises: any failure yields an
        initialized, unauthenticated state.  A token whose profile lookup
        fails is left in the store.
        """
        if self._initialize_started:
            logger.debug("AuthSession: initialize already ran; ignoring")
            return self.state
        self._initialize_started = True

        try:
            token = await self._store.read()
            if token:
                await self._set_session(token)
                user = await self._identity.fetch_profile()
                action = InitializeAction(authenticated=True, user=user)
            else:
                action = InitializeAction(authenticated=False)
        except Exception as exc:  # noqa: BLE001 — startup check never raises
            logger.warning("AuthSession: startup check failed: %s", exc, exc_info=True)
            action = InitializeAction(authenticated=False)

        return self._dispatch(action)

    async def login(self, identifier: str, secret: str) -> SessionState:
        """Sign in with an identifier/secret pair.

        The new token is persisted before the profile is fetched.  Any
        failure logs the cause, logs the session out and raises the
        normalized ``InvalidCredentialsError``.

        Raises
        ------
        ValueError
            If ``identifier`` or ``secret`` is empty.
        InvalidCredentialsError
            If verification, persistence, or the profile fetch fails.
        """
        if not identifier or not secret:
            raise ValueError("identifier and secret must both be non-empty")

        try:
            token = await self._identity.verify_credentials(identifier, secret)
            await self._set_session(token)
            user = await self._identity.fetch_profile()
        except Exception as exc:  # noqa: BLE001 — every cause maps to one error
            logger.warning("AuthSession: login failed: %s", exc, exc_info=True)
            await self.logout()
            raise InvalidCredentialsError() from None

        return self._dispatch(LoginAction(user=user))

    async def register(
        self, payload: RegistrationPayload | Mapping[str, Any]
    ) -> SessionState:
        """Create an account and sign in to it.

        Failures propagate unchanged and leave the state as it was; an
        existing session is not logged out.

        Parameters
        ----------
        payload:
            Registration fields, as a ``RegistrationPayload`` or a mapping
            validated into one.
        """
        if not isinstance(payload, RegistrationPayload):
            payload = RegistrationPayload.model_validate(dict(payload))

        try:
            token = await self._identity.create_account(payload)
            await self._set_session(token)
            user = await self._identity.fetch_profile()
        except Exception as exc:
            logger.warning("AuthSession: registration failed: %s", exc)
            raise

        return self._dispatch(RegisterAction(user=user))

    async def logout(self) -> SessionState:
        """Clear the stored token, reset the state and go to sign-in.

        Never raises.
        """
        await self._reset_session()
        state = self._dispatch(LogoutAction())
        try:
            self._navigator.go_to_sign_in()
        except Exception:  # noqa: BLE001 — navigation is fire-and-forget
            logger.exception("AuthSession: navigator %r raised", self._navigator)
        return state

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the identity client and the token store."""
        await self._identity.aclose()
        await self._store.aclose()

    async def __aenter__(self) -> AuthSession:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"AuthSession(status={self.state.status.value!r})"


async def open_session(
    store: TokenStore,
    identity: IdentityClient,
    navigator: Navigator | None = None,
) -> AuthSession:
    """Build an ``AuthSession`` and run its startup check.

    The caller owns the returned session and should ``await
    session.aclose()`` when done.
    """
    session = AuthSession(store, identity, navigator)
    await session.initialize()
    return session


__all__ = ["AuthSession", "Observer", "open_session"]
