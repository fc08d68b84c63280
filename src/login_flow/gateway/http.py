"""
HTTP authentication gateway.

Posts credentials to a server's ``/login`` endpoint with httpx and turns the
response into a ``User`` or an ``AuthError``:

    200                    -> User built from the JSON body
    400 / 401 / 403 / 422  -> AuthError(INVALID_CREDENTIALS)
    anything else (5xx...) -> AuthError(NETWORK)
    connect/timeout errors -> AuthError(NETWORK)
    non-JSON body          -> AuthError(NETWORK)

The gateway is designed to be used as an async context manager so the
connection pool is closed deterministically:

    async with HttpAuthGateway("http://localhost:8000") as gateway:
        user = await gateway.login("dayal", "1234")

Expected success body:
    {"id": "<uuid>", "name": "Dayal", "token": "..."}

``token`` falls back to ``session_id`` (for servers that issue sessions),
``name`` falls back to the submitted username and ``id`` to a fresh UUID.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx

from login_flow.config import DEFAULT_TIMEOUT, Config
from login_flow.models import AuthError, User

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

# The server understood the request and refused these credentials
REJECTED_STATUSES = frozenset({400, 401, 403, 422})


@dataclass
class HttpAuthGateway:
    """
    Async HTTP gateway for a remote login endpoint.

    Attributes:
        server_url: Base URL of the server, without trailing slash.
        timeout: Request timeout in seconds.

    Example:
        async with HttpAuthGateway.from_config(config) as gateway:
            flow = LoginFlowController(gateway)
    """

    server_url: str
    timeout: float = DEFAULT_TIMEOUT

    # Private attributes for the HTTP client
    _http_client: httpx.AsyncClient | None = field(default=None, repr=False)

    @classmethod
    def from_config(cls, config: Config) -> HttpAuthGateway:
        return cls(server_url=config.server_url, timeout=config.timeout)

    # -------------------------------------------------------------------------
    # Context Manager Protocol
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> HttpAuthGateway:
        return await self.open()

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the underlying HTTP client connection pool."""
        await self.aclose()

    async def open(self) -> HttpAuthGateway:
        """
        Create the underlying httpx.AsyncClient.

        For owners that cannot use ``async with`` (a Textual app opens the
        gateway on mount and closes it on unmount). Pair with ``aclose()``.
        """
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.server_url.rstrip("/"),
                timeout=self.timeout,
            )
        return self

    async def aclose(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """
        Get the HTTP client, ensuring it's been initialized.

        Raises:
            RuntimeError: If accessed before open() or outside async with.
        """
        if self._http_client is None:
            raise RuntimeError(
                "HttpAuthGateway must be used as an async context manager. "
                "Use 'async with HttpAuthGateway(url) as gateway:' or call open() first"
            )
        return self._http_client

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    async def login(self, username: str, password: str) -> User:
        """
        Authenticate against the server.

        Args:
            username: Trimmed username.
            password: Trimmed password.

        Returns:
            User: Built from the server's JSON response.

        Raises:
            AuthError: INVALID_CREDENTIALS when the server rejects the credentials
                (400, 401, 403, 422), NETWORK otherwise.
        """
        try:
            response = await self.http_client.post(
                LOGIN_PATH,
                json={"username": username, "password": password},
            )
        except httpx.HTTPError as e:
            raise AuthError.network(
                detail=f"Cannot connect to server at {self.server_url}: {e}"
            ) from e

        if response.status_code in REJECTED_STATUSES:
            raise AuthError.invalid_credentials(detail=_detail_of(response))

        if response.status_code != 200:
            raise AuthError.network(
                detail=f"Server returned status {response.status_code}: {_detail_of(response)}"
            )

        # Try to parse JSON response, handle non-JSON gracefully
        try:
            data = response.json()
        except ValueError as e:
            raise AuthError.network(
                detail=f"Server returned invalid response (status {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise AuthError.network(detail="Server response is not a JSON object")

        user = _user_from_payload(data, username)
        logger.info("HTTP login succeeded for %r", user.name)
        return user


def _detail_of(response: httpx.Response) -> str:
    """Best-effort 'detail' field from an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict):
        return str(data.get("detail", ""))
    return ""


def _user_from_payload(data: dict[str, Any], username: str) -> User:
    token = data.get("token") or data.get("session_id")
    if not token:
        raise AuthError.network(detail="Server response did not include a token")

    raw_id = data.get("id")
    try:
        user_id = uuid.UUID(str(raw_id)) if raw_id else uuid.uuid4()
    except ValueError as e:
        raise AuthError.network(detail=f"Server returned an invalid user id: {raw_id!r}") from e

    return User(id=user_id, name=str(data.get("name") or username), token=str(token))
