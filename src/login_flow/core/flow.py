"""
The login flow: a small reactive state machine over asynchronous input.

=============================================================================
PIPELINE
=============================================================================

    set_username / set_password
            |
            v
    debounce (200 ms, newest timer wins)
            |
            v
    trim + dedup  ---------------------> credentials (shared signal)
            |                                  |
            +--> validity --+                  |
            |               +--> is_submit_enabled
            |   is_loading -+                  |
            +--> idle status text              |
                                               v
    submit_requested ---------------> gate (valid and not loading)
                                               |
                                               v
                       is_loading=True, "Logging in…", user=None
                                               |
                                               v
                                  gateway.login() as a task
                                               |
                                               v
                       is_loading=False, user / error message

=============================================================================
STATES
=============================================================================

    IDLE --(admitted submit)--> SUBMITTING --(gateway answer)--> IDLE

There is no terminal state. At most one login is in flight because the gate
refuses submits while loading; nothing is ever cancelled to enforce it.

=============================================================================
THREADING
=============================================================================

Every mutation goes through the flow's ``EventDispatcher`` and runs on the
event loop thread the flow was created on. The gateway call runs as a task on
the same loop and posts its answer back through the dispatcher, so answers are
never interleaved with other events.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

from login_flow.config import DEFAULT_DEBOUNCE_MS
from login_flow.core import validation
from login_flow.core.dispatcher import EventDispatcher
from login_flow.core.events import Events, FlowEvent
from login_flow.core.signal import ReadOnlySignal, Signal
from login_flow.gateway.base import AuthGateway
from login_flow.models import AuthError, Credentials, LoginResult, User

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = DEFAULT_DEBOUNCE_MS / 1000.0


class FlowState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Delayed-call source. ``asyncio.AbstractEventLoop`` satisfies it."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class LoginFlowController:
    """
    View-model for a login screen.

    Inputs (from the UI, any thread):
        set_username(text), set_password(text), submit_requested()

    Outputs (read-only signals, emit on change):
        is_submit_enabled, status_text, is_loading, authenticated_user,
        plus credentials and state.

    Without ``loop`` the controller must be created inside a running event
    loop (typically a coroutine or a Textual ``on_mount``). With ``loop`` it
    may be built on any thread; all state still lives on that loop.

    Args:
        gateway: The authentication capability to call.
        debounce: Input quiet period in seconds.
        scheduler: Source of delayed calls for the debounce. Defaults to the
                   event loop; tests pass a manual clock.
        loop: Owning event loop. Defaults to the running loop.

    Example:
        flow = LoginFlowController(DemoAuthGateway())
        flow.status_text.subscribe(status_label.update)
        flow.set_username("dayal")
        flow.set_password("1234")
        # ... 200 ms later, status_text is "Ready to login"
        flow.submit_requested()
    """

    def __init__(
        self,
        gateway: AuthGateway,
        *,
        debounce: float = DEFAULT_DEBOUNCE,
        scheduler: Scheduler | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if debounce < 0:
            raise ValueError("debounce cannot be negative")

        self._gateway = gateway
        self._debounce = debounce
        self._loop = loop or asyncio.get_running_loop()
        self._scheduler: Scheduler = scheduler or self._loop

        self._dispatcher = EventDispatcher(self._loop)

        # Raw input cells, both start empty
        self._username = ""
        self._password = ""

        self._debounce_handle: TimerHandle | None = None
        self._login_tasks: set[asyncio.Task[None]] = set()
        self._attempts = 0
        self._closed = False

        # =====================================================================
        # OUTPUTS
        # =====================================================================
        self._credentials: Signal[Credentials | None] = Signal(None, name="credentials")
        self._is_valid: Signal[bool] = Signal(False, name="is_valid")
        self._is_loading: Signal[bool] = Signal(False, name="is_loading")
        self._is_submit_enabled: Signal[bool] = Signal(False, name="is_submit_enabled")
        self._status_text: Signal[str] = Signal(
            validation.STATUS_ENTER_CREDENTIALS, name="status_text"
        )
        self._authenticated_user: Signal[User | None] = Signal(None, name="authenticated_user")
        self._state: Signal[FlowState] = Signal(FlowState.IDLE, name="state")

        self._dispatcher.on(Events.USERNAME_CHANGED, self._on_username_changed)
        self._dispatcher.on(Events.PASSWORD_CHANGED, self._on_password_changed)
        self._dispatcher.on(Events.CREDENTIALS_SETTLED, self._on_credentials_settled)
        self._dispatcher.on(Events.SUBMIT_REQUESTED, self._on_submit_requested)
        self._dispatcher.on(Events.LOGIN_COMPLETED, self._on_login_completed)

        # The empty initial pair goes through the same debounce as typed input.
        # Timers belong to the loop, so a flow built off-loop schedules it there.
        if self._dispatcher.in_owner_context():
            self._schedule_debounce()
        else:
            self._loop.call_soon_threadsafe(self._schedule_debounce)

    # =========================================================================
    # INPUTS
    # =========================================================================

    def set_username(self, text: str) -> None:
        self._dispatcher.post(Events.USERNAME_CHANGED, {"value": text})

    def set_password(self, text: str) -> None:
        self._dispatcher.post(Events.PASSWORD_CHANGED, {"value": text})

    def submit_requested(self) -> None:
        """Ask for a login with the latest settled credentials."""
        self._dispatcher.post(Events.SUBMIT_REQUESTED)

    # =========================================================================
    # OUTPUTS
    # =========================================================================

    @property
    def credentials(self) -> ReadOnlySignal[Credentials | None]:
        """Debounced, trimmed, deduplicated credentials (None until first settle)."""
        return self._credentials

    @property
    def is_submit_enabled(self) -> ReadOnlySignal[bool]:
        return self._is_submit_enabled

    @property
    def status_text(self) -> ReadOnlySignal[str]:
        return self._status_text

    @property
    def is_loading(self) -> ReadOnlySignal[bool]:
        return self._is_loading

    @property
    def authenticated_user(self) -> ReadOnlySignal[User | None]:
        return self._authenticated_user

    @property
    def state(self) -> ReadOnlySignal[FlowState]:
        return self._state

    @property
    def dispatcher(self) -> EventDispatcher:
        """The event dispatcher, exposed for its event log."""
        return self._dispatcher

    @property
    def attempts(self) -> int:
        """Number of login attempts admitted so far."""
        return self._attempts

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # CREDENTIAL PIPELINE
    # =========================================================================

    def _on_username_changed(self, event: FlowEvent) -> None:
        self._username = event.detail["value"]
        self._schedule_debounce()

    def _on_password_changed(self, event: FlowEvent) -> None:
        self._password = event.detail["value"]
        self._schedule_debounce()

    def _schedule_debounce(self) -> None:
        # Only the newest timer may fire
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        self._debounce_handle = self._scheduler.call_later(self._debounce, self._debounce_elapsed)

    def _debounce_elapsed(self) -> None:
        self._debounce_handle = None
        self._dispatcher.post(
            Events.CREDENTIALS_SETTLED,
            {"username": self._username, "password": self._password},
            source="debounce",
        )

    def _on_credentials_settled(self, event: FlowEvent) -> None:
        credentials = Credentials.from_raw(event.detail["username"], event.detail["password"])

        if not self._credentials.set(credentials):
            logger.debug("Credentials unchanged after trim, nothing to do")
            return

        logger.debug("Credentials settled: %r", credentials)
        self._is_valid.set(validation.is_valid(credentials))
        self._refresh_submit_enabled()

        # While submitting, the status line belongs to the login attempt
        if not self._is_loading.value:
            self._status_text.set(validation.idle_status_text(credentials))

    def _refresh_submit_enabled(self) -> None:
        self._is_submit_enabled.set(self._is_valid.value and not self._is_loading.value)

    # =========================================================================
    # SUBMIT GATING
    # =========================================================================

    def _on_submit_requested(self, event: FlowEvent) -> None:
        credentials = self._credentials.value

        if credentials is None:
            logger.debug("Submit dropped: credentials have not settled yet")
            return
        if self._is_loading.value:
            logger.debug("Submit dropped: a login is already in progress")
            return
        if not validation.is_valid(credentials):
            logger.debug("Submit dropped: credentials are not valid")
            return

        self._attempts += 1
        attempt = self._attempts

        # Visible before the gateway is even called
        self._is_loading.set(True)
        self._state.set(FlowState.SUBMITTING)
        self._refresh_submit_enabled()
        self._status_text.set(validation.STATUS_LOGGING_IN)
        self._authenticated_user.set(None)

        logger.debug("Login attempt %d admitted for %r", attempt, credentials.username)
        task = self._loop.create_task(self._run_login(credentials, attempt))
        self._login_tasks.add(task)
        task.add_done_callback(self._login_tasks.discard)

    # =========================================================================
    # GATEWAY CALL AND RESULT
    # =========================================================================

    async def _run_login(self, credentials: Credentials, attempt: int) -> None:
        try:
            user = await self._gateway.login(credentials.username, credentials.password)
            result = LoginResult.success(user)
        except AuthError as e:
            result = LoginResult.failure(e)
        except Exception as e:
            # A gateway broke its contract; still end the attempt cleanly
            logger.error(f"Gateway raised unexpected error on attempt {attempt}: {e}", exc_info=True)
            result = LoginResult.failure(AuthError.network(detail=str(e)))

        self._dispatcher.post(
            Events.LOGIN_COMPLETED,
            {"attempt": attempt, "result": result},
            source="gateway",
        )

    def _on_login_completed(self, event: FlowEvent) -> None:
        result: LoginResult = event.detail["result"]
        attempt = event.detail["attempt"]

        self._is_loading.set(False)
        self._state.set(FlowState.IDLE)
        self._refresh_submit_enabled()

        if result.user is not None:
            logger.info("Login attempt %d succeeded for %r", attempt, result.user.name)
            self._authenticated_user.set(result.user)
            self._status_text.set(validation.welcome_message(result.user))
        else:
            assert result.error is not None
            logger.info("Login attempt %d failed: %s", attempt, result.error)
            self._authenticated_user.set(None)
            self._status_text.set(result.error.message)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def wait_until_idle(self) -> None:
        """Wait until every admitted login attempt has been applied."""
        while self._login_tasks:
            await asyncio.gather(*list(self._login_tasks), return_exceptions=True)

    def close(self) -> None:
        """
        Tear the flow down with its screen.

        Cancels the pending debounce timer and any in-flight login, detaches
        every observer and ignores later input. Safe to call twice. Called
        from outside the owning loop, the teardown runs on the loop later.
        """
        if self._closed:
            return
        if not self._dispatcher.in_owner_context():
            self._loop.call_soon_threadsafe(self.close)
            return
        self._closed = True

        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

        for task in list(self._login_tasks):
            task.cancel()

        self._dispatcher.close()
        for signal in (
            self._credentials,
            self._is_valid,
            self._is_loading,
            self._is_submit_enabled,
            self._status_text,
            self._authenticated_user,
            self._state,
        ):
            signal.clear_subscribers()

        logger.debug("Login flow closed after %d attempt(s)", self._attempts)
