"""
Event types and event records for the login flow dispatcher.

Every input the flow reacts to (a keystroke, a settled debounce, a submit tap,
a gateway answer) becomes a ``FlowEvent`` before it touches any state. Events
are immutable facts with a sequence number, which makes the flow's history
inspectable through ``EventDispatcher.get_event_log()``.

=============================================================================
NAMING CONVENTION
=============================================================================

Events use "domain:action" format in PAST TENSE:

    Good: "username:changed", "submit:requested", "login:completed"
    Bad:  "change_username", "submit", "do_login"

=============================================================================
USAGE
=============================================================================

    from login_flow.core.events import Events

    dispatcher.post(Events.USERNAME_CHANGED, {"value": "dayal"}, source="ui")
    dispatcher.on(Events.USERNAME_CHANGED, handle_username_changed)

=============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# =============================================================================
# EVENT TYPES
# =============================================================================


class Events:
    """
    All event types the login flow understands.

    These are class attributes because event types are global constants,
    not per-instance values.
    """

    # =========================================================================
    # UI INPUTS
    # =========================================================================

    USERNAME_CHANGED = "username:changed"
    """
    The username field changed (fired on every keystroke).

    Detail: {"value": str}  # raw, untrimmed text
    """

    PASSWORD_CHANGED = "password:changed"
    """
    The password field changed (fired on every keystroke).

    Detail: {"value": str}  # raw, untrimmed text
    """

    SUBMIT_REQUESTED = "submit:requested"
    """
    The user tapped the login button or pressed Enter.

    Detail: {}
    """

    # =========================================================================
    # INTERNAL
    # =========================================================================

    CREDENTIALS_SETTLED = "credentials:settled"
    """
    The inputs have been quiet for the debounce interval.

    Detail: {"username": str, "password": str}  # raw values at fire time
    """

    LOGIN_COMPLETED = "login:completed"
    """
    The gateway answered an admitted login attempt.

    Detail: {
        "attempt": int,          # 1-based attempt number
        "result": LoginResult    # success or failure, never both
    }
    """


def is_valid_event_type(event_type: str) -> bool:
    """Check if an event type is one of the ``Events`` constants."""
    return event_type in get_all_event_types()


def get_all_event_types() -> list[str]:
    """Return every event type constant, sorted."""
    return sorted(
        value
        for name, value in vars(Events).items()
        if isinstance(value, str) and not name.startswith("_")
    )


# =============================================================================
# EVENT RECORDS
# =============================================================================


@dataclass(frozen=True)
class EventMetadata:
    """
    Metadata attached to every committed event.

    Attributes:
        timestamp: Unix epoch milliseconds (UTC). For display only.
        source: Who posted the event ("ui", "debounce", "gateway").
        sequence: Monotonically increasing per dispatcher. The only
                  reliable ordering key.
    """

    timestamp: int
    source: str
    sequence: int

    @staticmethod
    def create(source: str, sequence: int) -> EventMetadata:
        """Build metadata stamped with the current UTC time."""
        now_ms = int(datetime.now(UTC).timestamp() * 1000)
        return EventMetadata(timestamp=now_ms, source=source, sequence=sequence)


@dataclass(frozen=True)
class FlowEvent:
    """
    A single committed event.

    Attributes:
        type: One of the ``Events`` constants.
        detail: Event payload. Treat as read-only.
        meta: Timestamp, source and sequence number.
    """

    type: str
    detail: dict[str, Any] = field(default_factory=dict)
    meta: EventMetadata | None = None

    def __str__(self) -> str:
        if self.meta:
            return f"FlowEvent(type='{self.type}', source='{self.meta.source}', seq={self.meta.sequence})"
        return f"FlowEvent(type='{self.type}')"

    def __repr__(self) -> str:
        # Detail may carry raw password text, so keep it out of reprs
        return f"FlowEvent(type={self.type!r}, keys={sorted(self.detail)!r}, meta={self.meta!r})"
