"""
The authentication capability the login flow depends on.

A gateway has one job: given a username and password, eventually return a
``User`` or raise ``AuthError``. It must do exactly one of the two. The flow
applies no timeout and no retry of its own, so a gateway that never answers
keeps the login screen in its loading state.

Implementations:
    DemoAuthGateway  - fixed demo account with simulated latency
    HttpAuthGateway  - POSTs credentials to a server's /login endpoint
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from login_flow.models import User


@runtime_checkable
class AuthGateway(Protocol):
    """Anything with an async ``login(username, password) -> User``."""

    async def login(self, username: str, password: str) -> User:
        """
        Authenticate a user.

        Args:
            username: Trimmed username.
            password: Trimmed password.

        Returns:
            The authenticated user.

        Raises:
            AuthError: If the credentials are rejected or the call fails.
        """
        ...
