#!/usr/bin/env python3
"""Example: Quickstart — token-auth-session

Minimal working example: sign in against an identity service, restart
with the persisted token, and sign out.  The identity service is simulated
with ``httpx.MockTransport`` so the example runs offline.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install token-auth-session
"""
from __future__ import annotations

import asyncio
import json
import tempfile

import httpx

import token_auth_session
from token_auth_session import (
    AuthSession,
    CallbackNavigator,
    FilesystemTokenStore,
    HttpIdentityClient,
)

USERS = {"ana@example.com": ("correct horse", "tok-ana")}
PROFILES = {"tok-ana": {"id": 42, "name": "Ana", "email": "ana@example.com"}}


def identity_service(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/auth/login/":
        body = json.loads(request.content)
        user = USERS.get(body["username"])
        if user is None or user[0] != body["password"]:
            return httpx.Response(400, json={"detail": "Unable to log in"})
        return httpx.Response(200, json={"token": user[1]})
    if request.url.path == "/auth/me/":
        token = request.headers.get("Authorization", "").removeprefix("Token ")
        if token not in PROFILES:
            return httpx.Response(401, json={"detail": "Invalid token"})
        return httpx.Response(200, json=PROFILES[token])
    return httpx.Response(404)


def make_session(storage_dir: str) -> AuthSession:
    return AuthSession(
        store=FilesystemTokenStore(storage_dir),
        identity=HttpIdentityClient(
            "https://id.example.com", transport=httpx.MockTransport(identity_service)
        ),
        navigator=CallbackNavigator(lambda path: print(f"  -> navigate to {path}")),
    )


async def main() -> None:
    print(f"token-auth-session version: {token_auth_session.__version__}")

    with tempfile.TemporaryDirectory() as storage_dir:
        # Step 1: first run, nothing persisted yet
        async with make_session(storage_dir) as session:
            print(f"Startup: {session.get_state().status.value}")
            session.subscribe(lambda state: print(f"  state -> {state.status.value}"))

            # Step 2: a wrong password gives the generic error and logs out
            try:
                await session.login("ana@example.com", "wrong")
            except token_auth_session.InvalidCredentialsError as exc:
                print(f"Login rejected: {exc}")

            # Step 3: correct credentials
            state = await session.login("ana@example.com", "correct horse")
            print(f"Signed in as {state.user.name if state.user else None}")

        # Step 4: "restart" — the token on disk restores the session
        async with make_session(storage_dir) as session:
            print(f"After restart: {session.get_state().status.value}, user={session.user}")
            await session.logout()
            print(f"After logout: {session.get_state().status.value}")


if __name__ == "__main__":
    asyncio.run(main())
