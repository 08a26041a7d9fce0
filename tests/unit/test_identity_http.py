"""Unit tests for token_auth_session.identity.http.HttpIdentityClient.

Requests are answered by ``httpx.MockTransport`` so no server is needed.
"""
from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from token_auth_session.errors import AuthenticationRejected, IdentityServiceError
from token_auth_session.identity.http import HttpIdentityClient
from token_auth_session.session.state import RegistrationPayload

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, **kwargs: object) -> HttpIdentityClient:
    return HttpIdentityClient(
        "https://id.example.com",
        transport=httpx.MockTransport(handler),
        **kwargs,  # type: ignore[arg-type]
    )


class TestVerifyCredentials:
    @pytest.mark.asyncio
    async def test_posts_username_and_password(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"token": "T2"})

        client = _client(handler)
        token = await client.verify_credentials("bo@example.com", "s3cret")

        assert token == "T2"
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/auth/login/"
        assert json.loads(seen[0].content) == {"username": "bo@example.com", "password": "s3cret"}
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403])
    async def test_rejection_statuses(self, status: int) -> None:
        client = _client(lambda request: httpx.Response(status, json={"detail": "no"}))
        with pytest.raises(AuthenticationRejected) as exc_info:
            await client.verify_credentials("bo@example.com", "wrong")
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        client = _client(lambda request: httpx.Response(503))
        with pytest.raises(IdentityServiceError) as exc_info:
            await client.verify_credentials("bo@example.com", "s3cret")
        assert not isinstance(exc_info.value, AuthenticationRejected)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_token(self) -> None:
        client = _client(lambda request: httpx.Response(200, json={"ok": True}))
        with pytest.raises(IdentityServiceError, match="no token"):
            await client.verify_credentials("bo@example.com", "s3cret")

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)
        with pytest.raises(IdentityServiceError, match="ConnectError") as exc_info:
            await client.verify_credentials("bo@example.com", "s3cret")
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(IdentityServiceError, match="non-JSON"):
            await client.verify_credentials("bo@example.com", "s3cret")

    @pytest.mark.asyncio
    async def test_non_object_body(self) -> None:
        client = _client(lambda request: httpx.Response(200, json=["T2"]))
        with pytest.raises(IdentityServiceError, match="expected an object"):
            await client.verify_credentials("bo@example.com", "s3cret")


class TestCreateAccount:
    @pytest.mark.asyncio
    async def test_posts_full_payload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"token": "T3"})

        client = _client(handler, register_path="/signup")
        payload = RegistrationPayload.model_validate(
            {"email": "cy@example.com", "password": "pw", "first_name": "Cy"}
        )
        assert await client.create_account(payload) == "T3"
        assert seen[0].url.path == "/signup"
        assert json.loads(seen[0].content) == {
            "email": "cy@example.com",
            "password": "pw",
            "first_name": "Cy",
        }

    @pytest.mark.asyncio
    async def test_rejection_carries_server_detail(self) -> None:
        client = _client(
            lambda request: httpx.Response(
                400, json={"email": ["user with this email already exists."]}
            )
        )
        payload = RegistrationPayload.model_validate({"email": "cy@example.com", "password": "pw"})
        with pytest.raises(AuthenticationRejected) as exc_info:
            await client.create_account(payload)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == {"email": ["user with this email already exists."]}
        assert "user with this email already exists." in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_server_error_text_detail(self) -> None:
        client = _client(lambda request: httpx.Response(502, text="bad gateway"))
        payload = RegistrationPayload.model_validate({"email": "cy@example.com", "password": "pw"})
        with pytest.raises(IdentityServiceError) as exc_info:
            await client.create_account(payload)
        assert exc_info.value.detail == "bad gateway"
        assert str(exc_info.value).endswith(": bad gateway")


class TestFetchProfile:
    @pytest.mark.asyncio
    async def test_sends_active_token(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": 42, "name": "Ana", "plan": "pro"})

        client = _client(handler)
        client.use_token("T1")
        profile = await client.fetch_profile()

        assert seen[0].headers["Authorization"] == "Token T1"
        assert seen[0].url.path == "/auth/me/"
        assert profile.to_dict() == {"id": 42, "name": "Ana", "plan": "pro"}

    @pytest.mark.asyncio
    async def test_use_token_none_drops_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(401)

        client = _client(handler)
        client.use_token("T1")
        assert client.has_token is True
        client.use_token(None)
        assert client.has_token is False

        with pytest.raises(AuthenticationRejected):
            await client.fetch_profile()
        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_malformed_profile(self) -> None:
        client = _client(lambda request: httpx.Response(200, json={"id": [1, 2]}))
        client.use_token("T1")
        with pytest.raises(IdentityServiceError, match="malformed profile"):
            await client.fetch_profile()


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self) -> None:
        async with _client(lambda request: httpx.Response(200, json={})) as client:
            assert isinstance(client, HttpIdentityClient)
        assert client._client.is_closed

    def test_repr_contains_base_url(self) -> None:
        client = _client(lambda request: httpx.Response(200))
        assert "id.example.com" in repr(client)
