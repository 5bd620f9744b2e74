"""
Event Value Objects for the socket simulator.

Browser-style event records delivered to listeners: a generic Event, a
MessageEvent carrying payload data, and a CloseEvent carrying the close
code. Validation happens at construction time; an empty type raises
ConstructionError.

The create_* factories also patch the target-family fields
(target, src_element, current_target) when a target is given.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from mock_socket.components.core.constants import CloseCode
from mock_socket.utils.exceptions import ConstructionError

__all__ = [
    "Event",
    "MessageEvent",
    "CloseEvent",
    "create_event",
    "create_message_event",
    "create_close_event",
]


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(eq=False, slots=True)
class Event:
    """
    Generic event.

    Attributes:
        type: Event name ("open", "error", "connection", ...).
        bubbles: Whether the event bubbles (never acted upon).
        cancelable: Whether prevent_default() has an effect.
        target: Object the event was dispatched for.
        src_element: Legacy alias of target.
        current_target: Object whose listeners are running.
        time_stamp: Creation time in milliseconds since the epoch.
    """

    type: str
    bubbles: bool = False
    cancelable: bool = False
    target: Any = field(default=None, repr=False)
    src_element: Any = field(default=None, repr=False)
    current_target: Any = field(default=None, repr=False)
    time_stamp: int = field(default_factory=_now_ms)
    default_prevented: bool = False
    return_value: bool = True
    is_trusted: bool = False
    event_phase: int = 0

    def __post_init__(self) -> None:
        if not self.type:
            raise ConstructionError(type(self).__name__)
        self.type = str(self.type)
        self.bubbles = bool(self.bubbles)
        self.cancelable = bool(self.cancelable)

    def init_event(self, type: str = "undefined", bubbles: bool = False, cancelable: bool = False) -> None:
        self.type = str(type)
        self.bubbles = bool(bubbles)
        self.cancelable = bool(cancelable)

    def stop_propagation(self) -> None:
        """No-op: there is no propagation path in the simulator."""

    def stop_immediate_propagation(self) -> None:
        """No-op: every listener of a dispatch is always invoked."""

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True
            self.return_value = False

    def _set_target(self, target: Any) -> None:
        self.target = target
        self.src_element = target
        self.current_target = target


@dataclass(eq=False, slots=True)
class MessageEvent(Event):
    """Event carrying a payload from one endpoint to another."""

    data: Any = None
    origin: str = ""
    last_event_id: str = ""
    ports: Any = None

    def __post_init__(self) -> None:
        Event.__post_init__(self)
        self.origin = str(self.origin) if self.origin else ""
        self.last_event_id = str(self.last_event_id) if self.last_event_id else ""


@dataclass(eq=False, slots=True)
class CloseEvent(Event):
    """Event describing why a connection ended."""

    code: int = 0
    reason: str = ""
    was_clean: bool = False

    def __post_init__(self) -> None:
        Event.__post_init__(self)
        self.code = int(self.code) if isinstance(self.code, int) else 0
        self.reason = str(self.reason) if self.reason else ""
        self.was_clean = bool(self.was_clean)


def create_event(type: str, target: Any = None) -> Event:
    """Create an Event, pointing its target fields at target when given."""
    event = Event(type)
    if target is not None:
        event._set_target(target)
    return event


def create_message_event(type: str, data: Any = None, origin: str = "", target: Any = None) -> MessageEvent:
    """Create a MessageEvent, pointing its target fields at target when given."""
    event = MessageEvent(type, data=data, origin=origin)
    if target is not None:
        event._set_target(target)
    return event


def create_close_event(
    type: str,
    code: int | None = None,
    reason: str = "",
    was_clean: bool | None = None,
    target: Any = None,
) -> CloseEvent:
    """
    Create a CloseEvent.

    Args:
        type: Event name, usually "close" or "disconnect".
        code: Close code; 0 when omitted.
        reason: Human-readable close reason.
        was_clean: Defaults to code == CloseCode.NORMAL when not truthy.
        target: Socket or server the event is about.
    """
    if not was_clean:
        was_clean = code == CloseCode.NORMAL
    event = CloseEvent(type, code=code if code is not None else 0, reason=reason, was_clean=was_clean)
    if target is not None:
        event._set_target(target)
    return event
