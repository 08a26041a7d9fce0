"""End-to-end tests: AuthSession wired to the real HTTP client and file store.

The identity service is simulated with ``httpx.MockTransport``.
"""
from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from token_auth_session import (
    AuthSession,
    CallbackNavigator,
    FilesystemTokenStore,
    HttpIdentityClient,
    InvalidCredentialsError,
    SessionStatus,
)

PROFILE = {"id": 42, "name": "Ana", "email": "ana@example.com"}


def _identity_service(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/auth/login/":
        body = json.loads(request.content)
        if body == {"username": "ana@example.com", "password": "pw"}:
            return httpx.Response(200, json={"token": "tok-ana"})
        return httpx.Response(400, json={"non_field_errors": ["Unable to log in"]})
    if request.url.path == "/auth/register/":
        return httpx.Response(201, json={"token": "tok-ana"})
    if request.url.path == "/auth/me/":
        if request.headers.get("Authorization") == "Token tok-ana":
            return httpx.Response(200, json=PROFILE)
        return httpx.Response(401, json={"detail": "Invalid token."})
    return httpx.Response(404)


def _session(tmp_path: Path, navigated: list[str]) -> AuthSession:
    return AuthSession(
        store=FilesystemTokenStore(tmp_path),
        identity=HttpIdentityClient(
            "https://id.example.com", transport=httpx.MockTransport(_identity_service)
        ),
        navigator=CallbackNavigator(navigated.append),
    )


@pytest.mark.asyncio
async def test_login_survives_restart(tmp_path: Path) -> None:
    navigated: list[str] = []

    async with _session(tmp_path, navigated) as session:
        assert session.get_state().status is SessionStatus.UNAUTHENTICATED
        await session.login("ana@example.com", "pw")
        assert session.user is not None
        assert session.user.to_dict() == PROFILE

    async with _session(tmp_path, navigated) as session:
        assert session.get_state().status is SessionStatus.AUTHENTICATED
        assert session.user is not None
        assert session.user.name == "Ana"

    assert navigated == []


@pytest.mark.asyncio
async def test_rejected_login_logs_out(tmp_path: Path) -> None:
    navigated: list[str] = []

    async with _session(tmp_path, navigated) as session:
        await session.login("ana@example.com", "pw")
        with pytest.raises(InvalidCredentialsError):
            await session.login("ana@example.com", "wrong")
        assert session.is_authenticated is False

    assert navigated == ["/auth/login"]
    assert not (tmp_path / "accessToken.token").exists()


@pytest.mark.asyncio
async def test_stale_token_is_kept_but_session_unauthenticated(tmp_path: Path) -> None:
    (tmp_path / "accessToken.token").write_text("revoked", encoding="utf-8")

    async with _session(tmp_path, []) as session:
        assert session.get_state().status is SessionStatus.UNAUTHENTICATED
        assert session.is_initialized is True

    assert (tmp_path / "accessToken.token").read_text(encoding="utf-8") == "revoked"


@pytest.mark.asyncio
async def test_register_then_logout(tmp_path: Path) -> None:
    navigated: list[str] = []

    async with _session(tmp_path, navigated) as session:
        await session.register({"email": "ana@example.com", "password": "pw"})
        assert session.is_authenticated is True
        await session.logout()
        assert session.is_authenticated is False

    assert navigated == ["/auth/login"]
