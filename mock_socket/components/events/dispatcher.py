"""
Event Dispatcher - listener registry shared by every socket-like object.

Listeners are kept per event type in registration order. The same callable
is registered at most once per type (identity, not equality).

dispatch() supports two delivery shapes:
- browser style: dispatch(event) calls listener(event)
- Socket.IO style: dispatch(event, *args) calls listener(*args)

Listener exceptions are not caught; they propagate to the dispatch caller
and listeners after the failing one do not run.
"""

from __future__ import annotations

from typing import Any, Callable

from mock_socket.components.events.types import Event

Listener = Callable[..., Any]


class EventDispatcher:
    """
    Minimal EventTarget.

    Usage:
        dispatcher = EventDispatcher()
        dispatcher.on("message", handler)
        dispatcher.dispatch(create_message_event("message", data="hi"))
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    @property
    def listeners(self) -> dict[str, list[Listener]]:
        """Snapshot of registered listeners by event type."""
        return {event_type: list(items) for event_type, items in self._listeners.items()}

    def listeners_for(self, event_type: str) -> list[Listener]:
        return list(self._listeners.get(event_type, []))

    def on(self, event_type: str, listener: Listener) -> None:
        """Register listener for event_type; non-callables and duplicates are ignored."""
        if not callable(listener):
            return
        registered = self._listeners.setdefault(event_type, [])
        if not any(item is listener for item in registered):
            registered.append(listener)

    def off(self, event_type: str, listener: Listener) -> None:
        """Remove listener from event_type. Unknown types and listeners are ignored."""
        registered = self._listeners.get(event_type)
        if not registered:
            return
        for index, item in enumerate(registered):
            if item is listener:
                del registered[index]
                return

    def dispatch(self, event: Event, *args: Any) -> bool:
        """
        Invoke every listener registered for event.type.

        Returns:
            False when no listener list exists for the type, True otherwise.
        """
        registered = self._listeners.get(event.type)
        if registered is None:
            return False
        # Snapshot: listeners may (un)register during delivery
        for listener in list(registered):
            self._invoke(listener, event, args)
        return True

    def _invoke(self, listener: Listener, event: Event, args: tuple[Any, ...]) -> None:
        if args:
            listener(*args)
        else:
            listener(event)

    # Browser-style aliases
    add_event_listener = on
    remove_event_listener = off
    dispatch_event = dispatch
