"""Identity service client subpackage.

Public surface
--------------
- IdentityClient      — abstract base class
- HttpIdentityClient  — httpx implementation for token-auth REST services
"""
from __future__ import annotations

from token_auth_session.identity.base import IdentityClient
from token_auth_session.identity.http import HttpIdentityClient

__all__ = ["HttpIdentityClient", "IdentityClient"]
