"""
Textual front end for the login flow.

Example:
    # Run with the demo account (dayal / 1234)
    login-flow-tui

    # Or against a server
    login-flow-tui --gateway http --server http://10.0.0.1:8000
"""

from login_flow.tui.app import LoginApp, main

__all__ = [
    "LoginApp",
    "main",
]
