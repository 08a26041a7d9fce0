"""Abstract identity service client.

Classes
-------
- IdentityClient  — network operations the session state machine relies on
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from token_auth_session.session.state import RegistrationPayload, UserProfile


class IdentityClient(ABC):
    """Protocol for talking to the remote identity service.

    Every network method raises ``IdentityServiceError`` (or its subclass
    ``AuthenticationRejected``) on failure.
    """

    @abstractmethod
    async def verify_credentials(self, identifier: str, secret: str) -> str:
        """Exchange an identifier/secret pair for a credential token.

        Parameters
        ----------
        identifier:
            Username or e-mail address.
        secret:
            Password.

        Returns
        -------
        str
            The token issued by the service.
        """

    @abstractmethod
    async def create_account(self, payload: RegistrationPayload) -> str:
        """Create an account and return the token issued for it."""

    @abstractmethod
    async def fetch_profile(self) -> UserProfile:
        """Return the profile of the user owning the active token."""

    @abstractmethod
    def use_token(self, token: str | None) -> None:
        """Make ``token`` the credential sent with later calls.

        Passing None drops the active credential.
        """

    async def aclose(self) -> None:
        """Release network resources.  No-op by default."""


__all__ = ["IdentityClient"]
