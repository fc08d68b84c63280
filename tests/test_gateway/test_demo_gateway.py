"""Tests for the single-account demo gateway."""

import asyncio

import pytest

from login_flow.gateway import AuthGateway, DemoAuthGateway
from login_flow.models import AuthError, AuthErrorKind
from tests.constants import DEMO_NAME, DEMO_PASSWORD, DEMO_TOKEN, DEMO_USERNAME


@pytest.fixture
def gateway() -> DemoAuthGateway:
    return DemoAuthGateway(latency=0.0)


class TestDemoAuthGateway:
    @pytest.mark.unit
    def test_satisfies_protocol(self, gateway):
        assert isinstance(gateway, AuthGateway)

    @pytest.mark.unit
    def test_negative_latency_rejected(self):
        with pytest.raises(ValueError, match="latency cannot be negative"):
            DemoAuthGateway(latency=-1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", [DEMO_USERNAME, "DAYAL", "DaYaL"])
    async def test_demo_account_any_case(self, gateway, username):
        user = await gateway.login(username, DEMO_PASSWORD)

        assert user.name == DEMO_NAME
        assert user.token == DEMO_TOKEN

    @pytest.mark.asyncio
    async def test_each_login_gets_fresh_id(self, gateway):
        first = await gateway.login(DEMO_USERNAME, DEMO_PASSWORD)
        second = await gateway.login(DEMO_USERNAME, DEMO_PASSWORD)

        assert first.id != second.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("username", "password"),
        [
            (DEMO_USERNAME, "9999"),
            ("wrong", DEMO_PASSWORD),
            # Password comparison is case sensitive and untrimmed
            (DEMO_USERNAME, " 1234"),
        ],
    )
    async def test_wrong_credentials(self, gateway, username, password):
        with pytest.raises(AuthError) as exc_info:
            await gateway.login(username, password)

        assert exc_info.value.kind is AuthErrorKind.INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_counts_calls(self, gateway):
        await gateway.login(DEMO_USERNAME, DEMO_PASSWORD)
        with pytest.raises(AuthError):
            await gateway.login(DEMO_USERNAME, "nope")

        assert gateway.calls == 2

    @pytest.mark.asyncio
    async def test_waits_for_latency(self):
        gateway = DemoAuthGateway(latency=10.0)

        task = asyncio.create_task(gateway.login(DEMO_USERNAME, DEMO_PASSWORD))
        await asyncio.sleep(0.01)

        assert not task.done()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
