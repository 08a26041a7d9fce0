"""HTTP identity client for token-authenticated REST services.

Speaks the common "token auth" dialect: credentials are exchanged for an
opaque token which is then sent as ``Authorization: Token <token>``.

Classes
-------
- HttpIdentityClient  — httpx-based ``IdentityClient``
"""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from token_auth_session.errors import AuthenticationRejected, IdentityServiceError
from token_auth_session.identity.base import IdentityClient
from token_auth_session.session.state import RegistrationPayload, UserProfile

logger = logging.getLogger(__name__)

_REJECTION_STATUSES: frozenset[int] = frozenset({400, 401, 403})
_AUTH_SCHEME = "Token"


class HttpIdentityClient(IdentityClient):
    """Identity client backed by ``httpx.AsyncClient``.

    Parameters
    ----------
    base_url:
        Root URL of the identity service, e.g. ``"https://api.example.com"``.
    login_path:
        Endpoint accepting ``{"username", "password"}`` and returning
        ``{"token"}``.
    register_path:
        Endpoint accepting the registration payload and returning
        ``{"token"}``.
    profile_path:
        Endpoint returning the current user's profile object.
    timeout_seconds:
        Transport timeout applied to every request; None waits forever.
    transport:
        Optional custom httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        *,
        login_path: str = "/auth/login/",
        register_path: str = "/auth/register/",
        profile_path: str = "/auth/me/",
        timeout_seconds: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._login_path = login_path
        self._register_path = register_path
        self._profile_path = profile_path
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    # ------------------------------------------------------------------
    # Token handling
    # ------------------------------------------------------------------

    def use_token(self, token: str | None) -> None:
        """Set or drop the ``Authorization`` header sent with every request."""
        if token is None:
            self._client.headers.pop("Authorization", None)
        else:
            self._client.headers["Authorization"] = f"{_AUTH_SCHEME} {token}"

    @property
    def has_token(self) -> bool:
        """True when an ``Authorization`` header is currently set."""
        return "Authorization" in self._client.headers

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object body.

        Raises
        ------
        AuthenticationRejected
            On 400, 401 or 403.
        IdentityServiceError
            On connectivity failure, any other non-2xx status, or a body
            that is not a JSON object.
        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise IdentityServiceError(
                f"{method} {path} failed: {type(exc).__name__}: {exc}"
            ) from exc

        if response.status_code in _REJECTION_STATUSES:
            raise AuthenticationRejected(
                f"{method} {path} rejected with HTTP {response.status_code}",
                status_code=response.status_code,
                detail=self._error_detail(response),
            )
        if response.is_error:
            raise IdentityServiceError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                detail=self._error_detail(response),
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise IdentityServiceError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise IdentityServiceError(
                f"{method} {path} returned {type(body).__name__}, expected an object",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _error_detail(response: httpx.Response) -> Any:
        """Decoded JSON error body, falling back to the raw text (None when empty)."""
        try:
            return response.json()
        except ValueError:
            return response.text.strip() or None

    @staticmethod
    def _extract_token(body: dict[str, Any], path: str) -> str:
        token = body.get("token")
        if not isinstance(token, str) or not token:
            raise IdentityServiceError(f"POST {path} response carries no token")
        return token

    # ------------------------------------------------------------------
    # IdentityClient interface
    # ------------------------------------------------------------------

    async def verify_credentials(self, identifier: str, secret: str) -> str:
        """POST the credentials to ``login_path`` and return the token."""
        body = await self._request(
            "POST",
            self._login_path,
            json={"username": identifier, "password": secret},
        )
        logger.debug("HttpIdentityClient: credentials verified for %r", identifier)
        return self._extract_token(body, self._login_path)

    async def create_account(self, payload: RegistrationPayload) -> str:
        """POST the registration payload to ``register_path`` and return the token."""
        body = await self._request(
            "POST",
            self._register_path,
            json=payload.model_dump(mode="json"),
        )
        logger.debug("HttpIdentityClient: account created for %r", payload.email)
        return self._extract_token(body, self._register_path)

    async def fetch_profile(self) -> UserProfile:
        """GET ``profile_path`` with the active token and parse the profile."""
        body = await self._request("GET", self._profile_path)
        try:
            return UserProfile.model_validate(body)
        except ValidationError as exc:
            raise IdentityServiceError(
                f"GET {self._profile_path} returned a malformed profile: {exc}"
            ) from exc

    async def aclose(self) -> None:
        """Close the underlying ``httpx.AsyncClient``."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpIdentityClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"HttpIdentityClient(base_url={str(self._client.base_url)!r})"


__all__ = ["HttpIdentityClient"]
