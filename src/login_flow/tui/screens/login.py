"""
Login screen bound to a LoginFlowController.

The screen holds no login logic of its own. It forwards every keystroke and
submit to the flow and renders the flow's outputs:

    is_submit_enabled   -> Login button enabled/disabled
    is_loading          -> loading indicator shown, inputs disabled
    status_text         -> status line
    authenticated_user  -> LoggedIn message posted to the app
"""

from __future__ import annotations

import logging

from textual import on
from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.message import Message
from textual.screen import Screen
from textual.widgets import Button, Input, Label, LoadingIndicator, Static

from login_flow.core.flow import LoginFlowController
from login_flow.core.signal import Unsubscribe
from login_flow.models import User

logger = logging.getLogger(__name__)


class LoginScreen(Screen):
    """
    Login screen with username/password form.

    CSS Classes:
        .login-box: The container for the login form.
        .login-title: The heading.
        .login-label: Labels for input fields.
        .login-input: The input fields.
        .login-button: The submit button.
        .login-spinner: Loading indicator shown while submitting.
        .login-status: Status message display.

    Messages:
        LoggedIn: Posted when the flow reports an authenticated user.
    """

    CSS = """
    LoginScreen {
        align: center middle;
    }

    .login-box {
        width: 60;
        height: auto;
        border: solid green;
        padding: 1 2;
    }

    .login-title {
        text-align: center;
        text-style: bold;
        color: $accent;
        padding-bottom: 1;
    }

    .login-input {
        margin-bottom: 1;
    }

    .login-button {
        width: 100%;
    }

    .login-spinner {
        height: 1;
    }

    .login-status {
        color: $text-muted;
        text-align: center;
        padding-top: 1;
    }
    """

    class LoggedIn(Message):
        """The flow authenticated a user."""

        def __init__(self, user: User) -> None:
            super().__init__()
            self.user = user

    def __init__(self, flow: LoginFlowController) -> None:
        super().__init__()
        self.flow = flow
        self._unsubscribers: list[Unsubscribe] = []

    def compose(self) -> ComposeResult:
        with Center():
            with Vertical(classes="login-box"):
                yield Static("Login", classes="login-title")
                yield Label("Username:", classes="login-label")
                yield Input(placeholder="Username (try: dayal)", id="username", classes="login-input")
                yield Label("Password:", classes="login-label")
                yield Input(
                    placeholder="Password (try: 1234)",
                    password=True,
                    id="password",
                    classes="login-input",
                )
                yield Button(
                    "Login", variant="primary", id="login-btn", classes="login-button", disabled=True
                )
                yield LoadingIndicator(id="spinner", classes="login-spinner")
                yield Static("", id="status", classes="login-status")

    def on_mount(self) -> None:
        """Bind the flow outputs and focus the username field."""
        self.query_one("#spinner", LoadingIndicator).display = False

        self._unsubscribers = [
            self.flow.is_submit_enabled.subscribe(self._render_submit_enabled),
            self.flow.status_text.subscribe(self._render_status),
            self.flow.is_loading.subscribe(self._render_loading),
            self.flow.authenticated_user.subscribe(self._render_user),
        ]
        self.query_one("#username", Input).focus()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    # -------------------------------------------------------------------------
    # View -> flow
    # -------------------------------------------------------------------------

    @on(Input.Changed, "#username")
    def handle_username_changed(self, event: Input.Changed) -> None:
        self.flow.set_username(event.value)

    @on(Input.Changed, "#password")
    def handle_password_changed(self, event: Input.Changed) -> None:
        self.flow.set_password(event.value)

    @on(Button.Pressed, "#login-btn")
    def handle_login_button(self) -> None:
        self.flow.submit_requested()

    @on(Input.Submitted)
    def handle_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in username moves to password; Enter in password submits."""
        if event.input.id == "username":
            self.query_one("#password", Input).focus()
        elif event.input.id == "password":
            self.flow.submit_requested()

    # -------------------------------------------------------------------------
    # Flow -> view
    # -------------------------------------------------------------------------

    def _render_submit_enabled(self, enabled: bool) -> None:
        self.query_one("#login-btn", Button).disabled = not enabled

    def _render_status(self, text: str) -> None:
        self.query_one("#status", Static).update(text)

    def _render_loading(self, loading: bool) -> None:
        self.query_one("#spinner", LoadingIndicator).display = loading
        for field_id in ("#username", "#password"):
            self.query_one(field_id, Input).disabled = loading

    def _render_user(self, user: User | None) -> None:
        if user is None:
            return
        logger.info("Logged in user: %r", user)
        self.post_message(self.LoggedIn(user))
