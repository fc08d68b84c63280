"""login-flow: a reactive login view-model.

The package turns raw username/password keystrokes and a "submit" tap into a
debounced, validated, asynchronous login with derived UI state. The core lives
in ``login_flow.core``; gateways (demo and HTTP) live in ``login_flow.gateway``
and a Textual front end lives in ``login_flow.tui``.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from login_flow.core.flow import FlowState, LoginFlowController
from login_flow.models import AuthError, AuthErrorKind, Credentials, LoginResult, User

try:
    __version__: str = version("login-flow")
except PackageNotFoundError:
    # Imported from a source tree without being installed
    __version__ = "0.0.0-dev"

__all__ = [
    "AuthError",
    "AuthErrorKind",
    "Credentials",
    "FlowState",
    "LoginFlowController",
    "LoginResult",
    "User",
    "__version__",
]
