"""Screens for the login flow TUI."""

from login_flow.tui.screens.login import LoginScreen

__all__ = ["LoginScreen"]
