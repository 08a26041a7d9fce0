"""CLI entry point for token-auth-session.

Invoked as::

    token-auth [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m token_auth_session.cli.main

Commands
--------
- version   — Show version information
- login     — Sign in and persist the token
- register  — Create an account and sign in to it
- logout    — Forget the persisted token
- whoami    — Run the startup check and show the session
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from token_auth_session.config import AuthSessionConfig, make_identity_client, make_token_store
from token_auth_session.errors import InvalidCredentialsError, TokenAuthError
from token_auth_session.navigation import CallbackNavigator
from token_auth_session.session.machine import AuthSession
from token_auth_session.session.state import SessionState

console = Console()

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _announce_sign_in(path: str) -> None:
    console.print(f"[dim]Signed out. Run 'token-auth login' to sign in again ({path}).[/dim]")


def _build_session(config: AuthSessionConfig) -> AuthSession:
    """Wire an ``AuthSession`` from ``config``."""
    return AuthSession(
        store=make_token_store(config),
        identity=make_identity_client(config),
        navigator=CallbackNavigator(_announce_sign_in, sign_in_path=config.sign_in_path),
    )


def _run_with_session(
    config: AuthSessionConfig,
    action: Callable[[AuthSession], Awaitable[T]],
) -> T:
    """Open a session (running the startup check), run ``action``, close it."""

    async def _main() -> T:
        async with _build_session(config) as session:
            return await action(session)

    return asyncio.run(_main())


def _parse_fields(fields: tuple[str, ...]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--field")
        parsed[key] = value
    return parsed


def _render_state(state: SessionState) -> None:
    table = Table(title="Session", show_lines=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    table.add_row("status", state.status.value)
    table.add_row("initialized", str(state.initialized))
    table.add_row("authenticated", str(state.authenticated))
    if state.user is not None:
        for key, value in state.user.to_dict().items():
            table.add_row(f"user.{key}", str(value))

    console.print(table)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="token-auth-session")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file.",
)
@click.option(
    "--storage",
    default=None,
    type=click.Choice(["memory", "filesystem", "sqlite", "redis"], case_sensitive=False),
    help="Token store backend (overrides config).",
)
@click.option("--storage-dir", default=None, help="Directory for the filesystem store.")
@click.option("--base-url", default=None, help="Identity service root URL.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    storage: str | None,
    storage_dir: str | None,
    base_url: str | None,
    verbose: bool,
) -> None:
    """Client-side token authentication sessions"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    try:
        config = AuthSessionConfig.load(config_path).with_overrides(
            storage=storage.lower() if storage else None,
            storage_dir=storage_dir,
            base_url=base_url,
        )
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show version information."""
    from token_auth_session import __version__

    console.print(f"[bold]token-auth-session[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------


@cli.command(name="login")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Account password.")
@click.pass_context
def login_command(ctx: click.Context, email: str, password: str) -> None:
    """Sign in as EMAIL and persist the session token."""
    config: AuthSessionConfig = ctx.obj["config"]

    async def _login(session: AuthSession) -> SessionState:
        return await session.login(email, password)

    try:
        state = _run_with_session(config, _login)
    except InvalidCredentialsError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    console.print("[green]Signed in.[/green]")
    _render_state(state)


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------


@cli.command(name="register")
@click.option("--email", required=True, help="E-mail address for the new account.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password for the new account.",
)
@click.option(
    "--field",
    "fields",
    multiple=True,
    metavar="KEY=VALUE",
    help="Extra registration field; repeatable.",
)
@click.pass_context
def register_command(
    ctx: click.Context,
    email: str,
    password: str,
    fields: tuple[str, ...],
) -> None:
    """Create an account and sign in to it."""
    config: AuthSessionConfig = ctx.obj["config"]
    payload: dict[str, Any] = {**_parse_fields(fields), "email": email, "password": password}

    async def _register(session: AuthSession) -> SessionState:
        return await session.register(payload)

    try:
        state = _run_with_session(config, _register)
    except (TokenAuthError, ValidationError) as exc:
        console.print(f"[red]Registration failed:[/red] {escape(str(exc))}")
        sys.exit(1)

    console.print("[green]Account created.[/green]")
    _render_state(state)


# ---------------------------------------------------------------------------
# logout
# ---------------------------------------------------------------------------


@cli.command(name="logout")
@click.pass_context
def logout_command(ctx: click.Context) -> None:
    """Forget the persisted session token."""
    config: AuthSessionConfig = ctx.obj["config"]

    async def _logout(session: AuthSession) -> SessionState:
        return await session.logout()

    _run_with_session(config, _logout)


# ---------------------------------------------------------------------------
# whoami
# ---------------------------------------------------------------------------


@cli.command(name="whoami")
@click.option("--json-output", is_flag=True, help="Output raw JSON instead of a table.")
@click.pass_context
def whoami_command(ctx: click.Context, json_output: bool) -> None:
    """Resolve the persisted token and show the session."""
    config: AuthSessionConfig = ctx.obj["config"]

    async def _state(session: AuthSession) -> SessionState:
        return session.get_state()

    state = _run_with_session(config, _state)

    if json_output:
        data = {
            "status": state.status.value,
            "initialized": state.initialized,
            "authenticated": state.authenticated,
            "user": state.user.to_dict() if state.user is not None else None,
        }
        console.print_json(json.dumps(data))
        return

    _render_state(state)
    if not state.authenticated:
        console.print("[yellow]Not signed in.[/yellow]")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
