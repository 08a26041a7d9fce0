"""Post-logout navigation hooks.

After a logout the surrounding application is told to send the user to its
sign-in entry point.  The session state machine only knows the
``Navigator`` interface; applications plug in whatever routing they use.

Classes
-------
- Navigator          — abstract base
- CallbackNavigator  — forwards the sign-in path to a plain callable
- LoggingNavigator   — only logs; default for headless use
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_SIGN_IN_PATH = "/auth/login"


class Navigator(ABC):
    """Receives the fire-and-forget "go to sign-in" notification."""

    @abstractmethod
    def go_to_sign_in(self) -> None:
        """Direct the application to its sign-in entry point."""


class CallbackNavigator(Navigator):
    """Calls ``callback(sign_in_path)`` on every logout.

    Parameters
    ----------
    callback:
        Router hook, e.g. ``router.push``.
    sign_in_path:
        Route of the sign-in entry point.
    """

    def __init__(
        self,
        callback: Callable[[str], object],
        sign_in_path: str = DEFAULT_SIGN_IN_PATH,
    ) -> None:
        self._callback = callback
        self.sign_in_path = sign_in_path

    def go_to_sign_in(self) -> None:
        self._callback(self.sign_in_path)


class LoggingNavigator(Navigator):
    """Logs the navigation request and does nothing else."""

    def __init__(self, sign_in_path: str = DEFAULT_SIGN_IN_PATH) -> None:
        self.sign_in_path = sign_in_path

    def go_to_sign_in(self) -> None:
        logger.info("Session ended; sign in again at %s", self.sign_in_path)


__all__ = [
    "DEFAULT_SIGN_IN_PATH",
    "CallbackNavigator",
    "LoggingNavigator",
    "Navigator",
]
