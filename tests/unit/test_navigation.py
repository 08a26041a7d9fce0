"""Unit tests for token_auth_session.navigation."""
from __future__ import annotations

import logging

import pytest

from token_auth_session.navigation import (
    DEFAULT_SIGN_IN_PATH,
    CallbackNavigator,
    LoggingNavigator,
    Navigator,
)


class TestCallbackNavigator:
    def test_passes_sign_in_path(self) -> None:
        calls: list[str] = []
        CallbackNavigator(calls.append, sign_in_path="/login").go_to_sign_in()
        assert calls == ["/login"]

    def test_default_path(self) -> None:
        calls: list[str] = []
        CallbackNavigator(calls.append).go_to_sign_in()
        assert calls == [DEFAULT_SIGN_IN_PATH]


class TestLoggingNavigator:
    def test_logs_sign_in_path(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="token_auth_session.navigation"):
            LoggingNavigator("/sign-in").go_to_sign_in()
        assert "/sign-in" in caplog.text


class TestNavigatorBase:
    def test_cannot_instantiate_abstract(self) -> None:
        with pytest.raises(TypeError):
            Navigator()  # type: ignore[abstract]
