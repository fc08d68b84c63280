"""
Credential rules and status messages for the login flow.

The rules are fixed: a username needs at least 3 characters and a password at
least 4, both measured after trimming. The status text shown while the user is
typing is picked by priority (first match wins):

    1. either field empty   -> "Enter credentials"
    2. username too short   -> "Username too short"
    3. password too short   -> "Password too short"
    4. otherwise            -> "Ready to login"

All functions take ``Credentials``, which are already trimmed.
"""

from __future__ import annotations

from login_flow.models import Credentials, User

# =============================================================================
# THRESHOLDS
# =============================================================================

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4

# =============================================================================
# STATUS MESSAGES
# =============================================================================

STATUS_ENTER_CREDENTIALS = "Enter credentials"
STATUS_USERNAME_TOO_SHORT = "Username too short"
STATUS_PASSWORD_TOO_SHORT = "Password too short"
STATUS_READY = "Ready to login"
STATUS_LOGGING_IN = "Logging in…"


def is_valid(credentials: Credentials) -> bool:
    """Return True when both fields meet their minimum length."""
    return (
        len(credentials.username) >= MIN_USERNAME_LENGTH
        and len(credentials.password) >= MIN_PASSWORD_LENGTH
    )


def validate_credentials(credentials: Credentials) -> tuple[bool, str]:
    """
    Validate credentials and describe the result.

    Args:
        credentials: Trimmed username/password pair.

    Returns:
        Tuple of (is_valid, status_message)
        - (True, "Ready to login") if valid
        - (False, reason) otherwise

    Examples:
        >>> validate_credentials(Credentials("", "1234"))
        (False, 'Enter credentials')
        >>> validate_credentials(Credentials("ab", "1234"))
        (False, 'Username too short')
        >>> validate_credentials(Credentials("bob", "xx"))
        (False, 'Password too short')
        >>> validate_credentials(Credentials("bob", "1234"))
        (True, 'Ready to login')
    """
    if not credentials.username or not credentials.password:
        return False, STATUS_ENTER_CREDENTIALS
    if len(credentials.username) < MIN_USERNAME_LENGTH:
        return False, STATUS_USERNAME_TOO_SHORT
    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        return False, STATUS_PASSWORD_TOO_SHORT
    return True, STATUS_READY


def idle_status_text(credentials: Credentials) -> str:
    """Status text shown while no login is in progress."""
    return validate_credentials(credentials)[1]


def welcome_message(user: User) -> str:
    """Status text shown after a successful login."""
    return f"Welcome, {user.name} ✅"
