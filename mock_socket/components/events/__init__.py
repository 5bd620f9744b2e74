"""
Event components.

Event value objects and the listener dispatcher.
"""

from mock_socket.components.events.types import (
    Event,
    MessageEvent,
    CloseEvent,
    create_event,
    create_message_event,
    create_close_event,
)
from mock_socket.components.events.dispatcher import EventDispatcher, Listener

__all__ = [
    "Event",
    "MessageEvent",
    "CloseEvent",
    "create_event",
    "create_message_event",
    "create_close_event",
    "EventDispatcher",
    "Listener",
]
