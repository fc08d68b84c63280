"""
Configuration management for the login flow TUI.

This module handles configuration from multiple sources with the following
precedence (highest to lowest):

1. Command-line arguments (--gateway, --server, --timeout, ...)
2. Environment variables (LOGIN_FLOW_GATEWAY, LOGIN_FLOW_SERVER_URL, ...)
3. Default values

The configuration is immutable once created, ensuring consistent behavior
throughout the application lifecycle.

Example:
    # Create config from CLI args
    config = Config.from_args(["--gateway", "http", "--server", "http://localhost:8000"])

    # Access configuration
    print(config.server_url)  # "http://localhost:8000"
    print(config.debounce)    # 0.2 (seconds)
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

# =============================================================================
# DEFAULT CONFIGURATION VALUES
# =============================================================================

# Which AuthGateway the app builds: the offline demo account or a real server.
GATEWAY_DEMO = "demo"
GATEWAY_HTTP = "http"
GATEWAY_CHOICES = (GATEWAY_DEMO, GATEWAY_HTTP)
DEFAULT_GATEWAY = GATEWAY_DEMO

DEFAULT_SERVER_URL = "http://localhost:8000"

# HTTP request timeout in seconds (HTTP gateway only).
DEFAULT_TIMEOUT = 30.0

# Quiet period before typed credentials are validated.
DEFAULT_DEBOUNCE_MS = 200

# Simulated round trip of the demo gateway, in seconds.
DEFAULT_LATENCY = 1.0

DEFAULT_LOG_LEVEL = "WARNING"

# Environment variable names for configuration.
ENV_GATEWAY = "LOGIN_FLOW_GATEWAY"
ENV_SERVER_URL = "LOGIN_FLOW_SERVER_URL"
ENV_TIMEOUT = "LOGIN_FLOW_TIMEOUT"
ENV_DEBOUNCE_MS = "LOGIN_FLOW_DEBOUNCE_MS"
ENV_LATENCY = "LOGIN_FLOW_LATENCY"
ENV_LOG_LEVEL = "LOGIN_FLOW_LOG_LEVEL"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for the login flow TUI.

    Attributes:
        gateway: "demo" or "http".
        server_url: Base URL of the auth server, without trailing slash.
        timeout: HTTP request timeout in seconds.
        debounce_ms: Input quiet period in milliseconds.
        latency: Demo gateway delay in seconds.
        log_level: Standard logging level name ("DEBUG", "INFO", ...).

    Example:
        config = Config(gateway="demo", latency=0.5)
    """

    gateway: str = DEFAULT_GATEWAY
    server_url: str = DEFAULT_SERVER_URL
    timeout: float = DEFAULT_TIMEOUT
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    latency: float = DEFAULT_LATENCY
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """
        Validate configuration values after initialization.

        Raises:
            ValueError: If any value is out of range or unknown.
        """
        if self.gateway not in GATEWAY_CHOICES:
            raise ValueError(f"gateway must be one of {', '.join(GATEWAY_CHOICES)}")

        if not self.server_url:
            raise ValueError("server_url cannot be empty")

        if self.timeout <= 0:
            raise ValueError("timeout must be a positive number")

        if self.debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")

        if self.latency < 0:
            raise ValueError("latency cannot be negative")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level: {self.log_level}")

    @property
    def debounce(self) -> float:
        """Debounce interval in seconds."""
        return self.debounce_ms / 1000.0

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_args(cls, args: Sequence[str] | None = None) -> Config:
        """
        Create a Config instance from command-line arguments.

        Unspecified options fall back to environment variables and then to
        the defaults above.

        Args:
            args: Command-line arguments to parse. If None, uses sys.argv[1:].

        Returns:
            Config: A fully populated configuration object.

        Example:
            config = Config.from_args(["--latency", "0.2"])
        """
        parser = argparse.ArgumentParser(
            prog="login-flow-tui",
            description="Terminal login screen driven by a reactive login flow",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  login-flow-tui                                     # Demo account (dayal / 1234)
  login-flow-tui --gateway http --server http://10.0.0.1:8000
  LOGIN_FLOW_DEBOUNCE_MS=500 login-flow-tui          # Via environment

Environment Variables:
  LOGIN_FLOW_GATEWAY      demo or http (default: demo)
  LOGIN_FLOW_SERVER_URL   Server URL (default: http://localhost:8000)
  LOGIN_FLOW_TIMEOUT      Request timeout in seconds (default: 30)
  LOGIN_FLOW_DEBOUNCE_MS  Input debounce in milliseconds (default: 200)
  LOGIN_FLOW_LATENCY      Demo gateway latency in seconds (default: 1.0)
  LOGIN_FLOW_LOG_LEVEL    Logging level (default: WARNING)
            """,
        )

        # None defaults mean "check env var, then use default"
        parser.add_argument(
            "--gateway",
            "-g",
            choices=GATEWAY_CHOICES,
            default=None,
            help=f"Authentication gateway (default: {DEFAULT_GATEWAY})",
        )
        parser.add_argument(
            "--server",
            "-s",
            dest="server_url",
            default=None,
            help=f"Auth server URL for the http gateway (default: {DEFAULT_SERVER_URL})",
        )
        parser.add_argument(
            "--timeout",
            "-t",
            type=float,
            default=None,
            help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT})",
        )
        parser.add_argument(
            "--debounce-ms",
            type=int,
            default=None,
            help=f"Input debounce in milliseconds (default: {DEFAULT_DEBOUNCE_MS})",
        )
        parser.add_argument(
            "--latency",
            type=float,
            default=None,
            help=f"Demo gateway latency in seconds (default: {DEFAULT_LATENCY})",
        )
        parser.add_argument(
            "--log-level",
            default=None,
            help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
        )

        parsed = parser.parse_args(args)

        gateway = parsed.gateway or os.environ.get(ENV_GATEWAY) or DEFAULT_GATEWAY

        server_url = parsed.server_url or os.environ.get(ENV_SERVER_URL) or DEFAULT_SERVER_URL
        server_url = server_url.rstrip("/")

        log_level = parsed.log_level or os.environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL

        return cls(
            gateway=gateway,
            server_url=server_url,
            timeout=_resolve(parsed.timeout, ENV_TIMEOUT, DEFAULT_TIMEOUT, float),
            debounce_ms=_resolve(parsed.debounce_ms, ENV_DEBOUNCE_MS, DEFAULT_DEBOUNCE_MS, int),
            latency=_resolve(parsed.latency, ENV_LATENCY, DEFAULT_LATENCY, float),
            log_level=log_level.upper(),
        )


def _resolve(cli_value: T | None, env_name: str, default: T, convert: Callable[[str], T]) -> T:
    """Pick CLI value, then converted env var, then default."""
    if cli_value is not None:
        return cli_value
    if env_name in os.environ:
        return convert(os.environ[env_name])
    return default
