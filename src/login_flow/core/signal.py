"""
Observable values with emit-on-change semantics.

A ``Signal`` holds the current value of one flow output (loading flag, status
text, ...). Setting it to an equal value is a no-op; setting it to a different
value notifies every subscriber, in subscription order. New subscribers get
the current value immediately, so a view bound late still starts in sync.

The UI only ever sees ``ReadOnlySignal``: it can read and subscribe, but only
the flow can ``set``.

Example:
    loading = Signal(False, name="is_loading")
    unsubscribe = loading.subscribe(lambda value: print("loading:", value))
    # prints "loading: False" right away

    loading.set(True)   # prints "loading: True"
    loading.set(True)   # nothing, value unchanged
    unsubscribe()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Handlers may return nothing or an awaitable to run on the loop
SignalHandler = Callable[[T], None] | Callable[[T], Awaitable[None]]

Unsubscribe = Callable[[], None]


class ReadOnlySignal(Generic[T]):
    """
    Read/subscribe view of an observable value.

    Attributes:
        name: Label used in log messages.
    """

    def __init__(self, initial: T, *, name: str = "") -> None:
        self.name = name or "signal"
        self._value: T = initial
        self._subscribers: list[SignalHandler] = []
        self._tasks: set[asyncio.Future[None]] = set()

    @property
    def value(self) -> T:
        """The current value."""
        return self._value

    def subscribe(self, handler: SignalHandler, *, replay: bool = True) -> Unsubscribe:
        """
        Observe changes to this value.

        Handlers run inline when the value changes. An awaitable they return
        (coroutine functions, partials of them, objects with an async
        ``__call__``) is scheduled as a task on the running loop; such tasks
        see values in scheduling order but may run after later changes land.

        Args:
            handler: Called with the new value after each change.
            replay: Also call the handler once with the current value now.

        Returns:
            A function that removes the handler.
        """
        self._subscribers.append(handler)
        if replay:
            self._deliver(handler, self._value)

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(handler)
            except ValueError:
                pass

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def clear_subscribers(self) -> None:
        """Detach every subscriber and cancel any async deliveries in flight."""
        self._subscribers.clear()
        for task in list(self._tasks):
            task.cancel()

    def _notify(self) -> None:
        for handler in list(self._subscribers):
            self._deliver(handler, self._value)

    def _deliver(self, handler: SignalHandler, value: T) -> None:
        # A failing observer must not break the flow or the other observers
        try:
            result = handler(value)
            # Covers coroutine functions, partials of them and async __call__
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result, loop=asyncio.get_running_loop())
                self._tasks.add(task)
                task.add_done_callback(self._task_done)
        except Exception as e:
            logger.error(f"Subscriber error on '{self.name}': {e}", exc_info=True)

    def _task_done(self, task: asyncio.Future[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Async subscriber error on '{self.name}': {exc}", exc_info=exc)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self._value!r})"


class Signal(ReadOnlySignal[T]):
    """A ``ReadOnlySignal`` its owner can update."""

    def set(self, value: T) -> bool:
        """
        Update the value and notify subscribers if it changed.

        Returns:
            True if the value changed (and subscribers were notified).
        """
        if value == self._value:
            return False
        self._value = value
        self._notify()
        return True
