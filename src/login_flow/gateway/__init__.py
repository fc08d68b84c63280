"""Authentication gateways consumed by the login flow."""

from login_flow.gateway.base import AuthGateway
from login_flow.gateway.demo import DemoAuthGateway
from login_flow.gateway.http import HttpAuthGateway

__all__ = [
    "AuthGateway",
    "DemoAuthGateway",
    "HttpAuthGateway",
]
