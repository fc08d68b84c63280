"""
Serialized event dispatcher for the login flow.

The dispatcher is the flow's single mutation entry point. Text changes, submit
taps, debounce timers and gateway answers all arrive here as events and are
applied one at a time, in order, on the thread that owns the event loop.

=============================================================================
RULES
=============================================================================

1. ONE EVENT AT A TIME
   - Handlers for an event run to completion before the next event starts
   - An event posted from inside a handler is queued, not applied inline

2. ONE THREAD
   - Events are applied on the thread running the dispatcher's loop, whichever
     thread built the dispatcher
   - Posts made outside that loop are marshalled with call_soon_threadsafe

3. EVENTS ARE FACTS
   - A posted event is committed to the log with a sequence number before
     any handler sees it
   - Handler errors are logged and never un-commit the event

=============================================================================
USAGE
=============================================================================

    dispatcher = EventDispatcher(loop)

    unsubscribe = dispatcher.on(Events.USERNAME_CHANGED, handle_username)
    dispatcher.post(Events.USERNAME_CHANGED, {"value": "dayal"}, source="ui")

    # Later
    unsubscribe()

=============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from login_flow.core.events import EventMetadata, FlowEvent

logger = logging.getLogger(__name__)

# A handler takes the committed event and returns nothing
EventHandler = Callable[[FlowEvent], None]

# An unsubscribe function takes no args and returns nothing
Unsubscribe = Callable[[], None]

# Enough history to debug a login screen without growing forever
DEFAULT_LOG_SIZE = 1000


class EventDispatcher:
    """
    Applies posted events one at a time on the owning event loop thread.

    Unlike a process-wide bus there is one dispatcher per flow, so each login
    screen gets its own ordering and its own event log.

    Attributes:
        debug: When True, logs every commit/subscribe/unsubscribe.

    Key Methods:
    - post(): Queue an event and apply it (from any thread)
    - on(): Subscribe a handler to an event type
    - get_event_log(): Retrieve committed events (oldest first)
    - close(): Drop handlers and ignore further posts
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        *,
        log_size: int = DEFAULT_LOG_SIZE,
    ) -> None:
        """
        Create a dispatcher bound to an event loop.

        May be built on any thread. The owner is whichever thread runs
        ``loop``, and every handler runs there.

        Args:
            loop: The loop that owns all flow state.
            log_size: Maximum number of events kept in the log.
        """
        self._loop = loop

        # Registration order is delivery order
        self._handlers: dict[str, list[EventHandler]] = {}

        # Pending (type, detail, source) tuples, drained in FIFO order
        self._queue: deque[tuple[str, dict[str, Any], str]] = deque()
        self._draining = False

        self._event_log: deque[FlowEvent] = deque(maxlen=log_size)
        self._sequence = 0
        self._closed = False

        self.debug = False

    # =========================================================================
    # POST (THE ONLY WAY IN)
    # =========================================================================

    def post(self, event_type: str, detail: dict[str, Any] | None = None, source: str = "ui") -> None:
        """
        Post an event for serialized processing.

        Called from the owning loop outside any handler, the event is committed
        and delivered before this returns. Called from inside a handler, it is
        queued and delivered once the current event finishes. Called from
        anywhere else (another thread, or this thread before the loop runs), it
        is handed to the loop and processed there later.

        Args:
            event_type: One of the ``Events`` constants.
            detail: Event payload. Defaults to an empty dict.
            source: Who is posting ("ui", "debounce", "gateway").
        """
        if self._closed:
            logger.debug("Dispatcher closed, ignoring '%s' from %s", event_type, source)
            return

        if not self.in_owner_context():
            self._loop.call_soon_threadsafe(self.post, event_type, detail, source)
            return

        self._queue.append((event_type, detail if detail is not None else {}, source))

        # A handler is already draining the queue further up the stack
        if self._draining:
            return

        self._draining = True
        try:
            while self._queue and not self._closed:
                queued_type, queued_detail, queued_source = self._queue.popleft()
                self._commit(queued_type, queued_detail, queued_source)
        finally:
            self._draining = False

    def _commit(self, event_type: str, detail: dict[str, Any], source: str) -> FlowEvent:
        """Assign a sequence number, log the event and notify handlers."""
        self._sequence += 1
        event = FlowEvent(
            type=event_type,
            detail=detail,
            meta=EventMetadata.create(source, self._sequence),
        )
        self._event_log.append(event)

        if self.debug:
            logger.debug("COMMIT [%d]: %s from %s", self._sequence, event_type, source)

        # Copy so a handler can unsubscribe itself mid-delivery
        for handler in list(self._handlers.get(event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler error for '{event_type}': {e}", exc_info=True)

        return event

    # =========================================================================
    # SUBSCRIBE
    # =========================================================================

    def on(self, event_type: str, handler: EventHandler) -> Unsubscribe:
        """
        Subscribe a handler to an event type.

        Args:
            event_type: The event type to listen for.
            handler: Called with each committed ``FlowEvent`` of that type.

        Returns:
            A function that removes the handler. Calling it twice is harmless.
        """
        self._handlers.setdefault(event_type, []).append(handler)

        if self.debug:
            logger.debug(
                "SUBSCRIBE: '%s' (total handlers: %d)", event_type, len(self._handlers[event_type])
            )

        def unsubscribe() -> None:
            try:
                self._handlers.get(event_type, []).remove(handler)
            except ValueError:
                # Already removed
                return
            if self.debug:
                logger.debug("UNSUBSCRIBE: '%s'", event_type)

        return unsubscribe

    # =========================================================================
    # INSPECTION
    # =========================================================================

    def get_event_log(self, limit: int | None = None) -> list[FlowEvent]:
        """
        Get committed events, oldest first.

        Args:
            limit: Return only the last N events. None returns everything kept.
        """
        if limit is not None:
            return list(self._event_log)[-limit:]
        return list(self._event_log)

    def in_owner_context(self) -> bool:
        """True when called from code running on the dispatcher's loop."""
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            # No loop running on this thread
            return False

    def get_sequence(self) -> int:
        """Sequence number of the last committed event (0 if none)."""
        return self._sequence

    def get_handler_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def close(self) -> None:
        """Drop all handlers and pending events; later posts are ignored."""
        self._closed = True
        self._handlers.clear()
        self._queue.clear()
