"""
Demo gateway with a single hard-coded account.

Accepts username "dayal" (any letter case) with password "1234" after a
simulated network delay; rejects everything else as invalid credentials.
Useful for running the TUI without a server.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from login_flow.config import DEFAULT_LATENCY
from login_flow.models import AuthError, User

logger = logging.getLogger(__name__)

DEMO_USERNAME = "dayal"
DEMO_PASSWORD = "1234"
DEMO_DISPLAY_NAME = "Dayal"
DEMO_TOKEN = "token_abc_123"


class DemoAuthGateway:
    """
    In-process gateway backed by one demo account.

    Attributes:
        latency: Seconds to wait before answering.
        calls: Number of login calls received so far.

    Example:
        gateway = DemoAuthGateway(latency=0.0)
        user = await gateway.login("DAYAL", "1234")
        assert user.name == "Dayal"
    """

    def __init__(self, latency: float = DEFAULT_LATENCY) -> None:
        if latency < 0:
            raise ValueError("latency cannot be negative")
        self.latency = latency
        self.calls = 0

    async def login(self, username: str, password: str) -> User:
        """Answer after ``latency`` seconds; raise AuthError on mismatch."""
        self.calls += 1
        logger.debug("Demo login for %r (latency %.2fs)", username, self.latency)

        await asyncio.sleep(self.latency)

        if username.lower() == DEMO_USERNAME and password == DEMO_PASSWORD:
            return User(id=uuid.uuid4(), name=DEMO_DISPLAY_NAME, token=DEMO_TOKEN)

        raise AuthError.invalid_credentials(detail=f"no demo account matches {username!r}")
