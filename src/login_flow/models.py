"""
Value types shared by the login flow, its gateways and the UI layer.

Everything here is plain data:

- ``Credentials``: the trimmed (username, password) pair the flow reasons about
- ``User``: the record a gateway returns on success
- ``AuthError``: the only failure a gateway is allowed to raise
- ``LoginResult``: success or failure folded into one value

``AuthError`` follows the same shape as the HTTP client errors elsewhere in the
package: a dataclass exception with a human-readable message and an optional
technical detail. The message is what the user sees; the detail is for logs.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

# =============================================================================
# CREDENTIALS
# =============================================================================


@dataclass(frozen=True)
class Credentials:
    """
    A trimmed username/password pair.

    Instances are immutable and compare by value, so two raw inputs that trim
    to the same strings produce equal credentials. Build them from raw text
    with ``Credentials.from_raw`` rather than the constructor.

    Attributes:
        username: Username with leading/trailing whitespace removed.
        password: Password with leading/trailing whitespace removed.

    Example:
        >>> Credentials.from_raw("  dayal ", "1234\\n")
        Credentials(username='dayal', password='****')
    """

    username: str = ""
    password: str = ""

    @classmethod
    def from_raw(cls, username: str, password: str) -> Credentials:
        """Trim both fields (spaces, tabs and newlines) and build a pair."""
        return cls(username=username.strip(), password=password.strip())

    def __repr__(self) -> str:
        # Never leak the password into logs or tracebacks
        masked = "*" * len(self.password)
        return f"Credentials(username={self.username!r}, password={masked!r})"


# =============================================================================
# USER
# =============================================================================


@dataclass(frozen=True)
class User:
    """
    An authenticated user as returned by a gateway.

    Attributes:
        id: Opaque unique identifier.
        name: Display name used in the welcome message.
        token: Session/bearer token issued by the gateway.
    """

    id: uuid.UUID
    name: str
    token: str

    def __repr__(self) -> str:
        return f"User(id={self.id!s}, name={self.name!r})"


# =============================================================================
# ERRORS
# =============================================================================


class AuthErrorKind(Enum):
    """Failure categories a gateway can report, with their user-facing text."""

    INVALID_CREDENTIALS = "Invalid username or password."
    NETWORK = "Network error. Please try again."

    @property
    def message(self) -> str:
        return self.value


@dataclass
class AuthError(Exception):
    """
    Exception raised by gateways when a login attempt fails.

    The flow never lets this escape: it is caught and folded into a
    ``LoginResult`` whose message becomes the status text.

    Attributes:
        kind: What went wrong (bad credentials or transport failure).
        detail: Technical detail for logs. Never shown to the user.

    Example:
        try:
            user = await gateway.login("dayal", "nope")
        except AuthError as e:
            print(e.message)  # "Invalid username or password."
    """

    kind: AuthErrorKind
    detail: str = ""

    @property
    def message(self) -> str:
        """The user-facing message for this failure."""
        return self.kind.message

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message

    @classmethod
    def invalid_credentials(cls, detail: str = "") -> AuthError:
        return cls(kind=AuthErrorKind.INVALID_CREDENTIALS, detail=detail)

    @classmethod
    def network(cls, detail: str = "") -> AuthError:
        return cls(kind=AuthErrorKind.NETWORK, detail=detail)


# =============================================================================
# LOGIN RESULT
# =============================================================================


@dataclass(frozen=True)
class LoginResult:
    """
    Outcome of one login attempt: exactly one of ``user`` or ``error``.

    Folding both outcomes into one value lets the flow handle every attempt
    through the same path, whatever the gateway did.

    Raises:
        ValueError: If both or neither of ``user`` and ``error`` are set.
    """

    user: User | None = None
    error: AuthError | None = None

    def __post_init__(self) -> None:
        if (self.user is None) == (self.error is None):
            raise ValueError("LoginResult needs exactly one of user or error")

    @property
    def succeeded(self) -> bool:
        return self.user is not None

    @classmethod
    def success(cls, user: User) -> LoginResult:
        return cls(user=user)

    @classmethod
    def failure(cls, error: AuthError) -> LoginResult:
        return cls(error=error)
