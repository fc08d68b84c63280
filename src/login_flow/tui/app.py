"""
Main application module for the login flow TUI.

This module defines the LoginApp class, a Textual application that hosts a
single LoginScreen. It manages:
- Gateway construction (demo or HTTP) and its lifecycle
- The LoginFlowController bound to the screen
- Logging routed to the Textual devtools console

Entry Point:
    The main() function serves as the CLI entry point, configured
    in pyproject.toml as the "login-flow-tui" console script.

Example:
    # Run from command line
    login-flow-tui --latency 0.5

    # Or programmatically
    from login_flow.tui import LoginApp
    from login_flow.config import Config

    app = LoginApp(Config.from_args())
    app.run()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from textual.app import App
from textual.binding import Binding
from textual.logging import TextualHandler

from login_flow.config import GATEWAY_HTTP, Config
from login_flow.core.flow import LoginFlowController
from login_flow.gateway.base import AuthGateway
from login_flow.gateway.demo import DemoAuthGateway
from login_flow.gateway.http import HttpAuthGateway
from login_flow.tui.screens.login import LoginScreen

logger = logging.getLogger(__name__)


class LoginApp(App):
    """
    Textual application wrapping one login flow.

    Attributes:
        config: Application configuration.
        gateway: The AuthGateway in use. Created on mount.
        flow: The LoginFlowController. Created on mount (it needs the loop).

    Lifecycle:
        1. on_mount: builds gateway and flow, pushes LoginScreen
        2. on_login_screen_logged_in: notifies the user
        3. on_unmount: closes the flow and the gateway
    """

    TITLE = "Login Flow"
    SUB_TITLE = "Reactive login demo"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True, show=False),
        Binding("ctrl+q", "quit", "Quit", priority=True, show=False),
    ]

    CSS = """
    Screen {
        background: $surface;
    }
    """

    def __init__(self, config: Config, gateway: AuthGateway | None = None) -> None:
        """
        Initialize the application.

        Args:
            config: Application configuration object.
            gateway: Optional gateway override (tests inject fakes here).
        """
        super().__init__()
        self.config = config
        self.gateway: AuthGateway | None = gateway
        self.flow: LoginFlowController | None = None

    async def on_mount(self) -> None:
        if self.gateway is None:
            self.gateway = await self._build_gateway()

        self.flow = LoginFlowController(self.gateway, debounce=self.config.debounce)
        await self.push_screen(LoginScreen(self.flow))

    async def _build_gateway(self) -> AuthGateway:
        if self.config.gateway == GATEWAY_HTTP:
            logger.info("Using HTTP gateway at %s", self.config.server_url)
            return await HttpAuthGateway.from_config(self.config).open()
        logger.info("Using demo gateway (latency %.2fs)", self.config.latency)
        return DemoAuthGateway(latency=self.config.latency)

    async def on_unmount(self) -> None:
        if self.flow is not None:
            self.flow.close()
            self.flow = None
        if isinstance(self.gateway, HttpAuthGateway):
            await self.gateway.aclose()

    def on_login_screen_logged_in(self, message: LoginScreen.LoggedIn) -> None:
        self.notify(f"Logged in as {message.user.name}", title="Welcome")


def configure_logging(config: Config) -> None:
    """Send log records to the Textual devtools console, not the terminal."""
    logging.basicConfig(level=config.log_level_number, handlers=[TextualHandler()])


def main(args: Sequence[str] | None = None) -> int:
    """
    Main entry point for the login TUI.

    Args:
        args: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success, 130 on Ctrl+C).
    """
    try:
        config = Config.from_args(args)
        configure_logging(config)

        app = LoginApp(config)
        app.run()

        return 0

    except KeyboardInterrupt:
        return 130
