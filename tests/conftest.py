"""
Shared pytest fixtures for the login flow test suite.

Fixtures wire the fakes from tests/fakes.py into a LoginFlowController:
- scheduler: ManualScheduler driving the debounce
- gateway: ControlledGateway answering logins on demand
- flow: a controller whose initial empty pair has already settled
- settle: advance the clock past the debounce interval
- loop_in_thread: an event loop running on a background thread
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncGenerator, Callable, Generator

import pytest

from login_flow.core.flow import DEFAULT_DEBOUNCE, LoginFlowController
from tests.fakes import ControlledGateway, ManualScheduler


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def gateway() -> ControlledGateway:
    return ControlledGateway()


@pytest.fixture
async def flow(
    scheduler: ManualScheduler, gateway: ControlledGateway
) -> AsyncGenerator[LoginFlowController, None]:
    """
    A flow on the manual clock, past its first quiet period.

    Yields:
        LoginFlowController showing "Enter credentials"
    """
    controller = LoginFlowController(gateway, scheduler=scheduler)
    scheduler.advance(DEFAULT_DEBOUNCE)
    yield controller
    controller.close()


@pytest.fixture
def settle(scheduler: ManualScheduler) -> Callable[[], None]:
    """Advance the clock past the debounce interval."""

    def _settle() -> None:
        scheduler.advance(DEFAULT_DEBOUNCE)

    return _settle


@pytest.fixture
def loop_in_thread() -> Generator[tuple[asyncio.AbstractEventLoop, threading.Thread], None, None]:
    """
    A loop served by its own thread, for code that is handed ``loop=``.

    Yields:
        (loop, thread): the test body runs on a different thread than the loop
    """
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, name="flow-loop", daemon=True)
    thread.start()
    yield loop, thread
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=2)
    loop.close()
