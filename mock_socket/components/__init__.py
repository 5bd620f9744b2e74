"""
Socket Simulator Components.

Organized into domain-specific modules:
- core/       - Foundational components (constants, scheduler, binding, DI)
- events/     - Event value objects and dispatcher
- connection/ - URL directory (registry, URL normalization)
- broadcast/  - Room and broadcast fan-out

All public symbols are re-exported here for short import paths.
"""

# =============================================================================
# Core Components
# =============================================================================
from mock_socket.components.core.constants import ReadyState, CloseCode
from mock_socket.components.core.binding import Binding, install, uninstall
from mock_socket.components.core.scheduler import (
    Scheduler,
    AsyncioScheduler,
    ManualScheduler,
)
from mock_socket.components.core.dependencies import (
    get_registry,
    get_scheduler,
    set_scheduler,
    reset_singletons,
)

# =============================================================================
# Events
# =============================================================================
from mock_socket.components.events.types import (
    Event,
    MessageEvent,
    CloseEvent,
    create_event,
    create_message_event,
    create_close_event,
)
from mock_socket.components.events.dispatcher import EventDispatcher

# =============================================================================
# Connection Management
# =============================================================================
from mock_socket.components.connection.registry import ConnectionEntry, ConnectionRegistry
from mock_socket.components.connection.urls import normalize_url

# =============================================================================
# Broadcasting
# =============================================================================
from mock_socket.components.broadcast.router import RoomBroadcaster, SocketBroadcast, dedupe

__all__ = [
    # Core
    "ReadyState",
    "CloseCode",
    "Binding",
    "install",
    "uninstall",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "get_registry",
    "get_scheduler",
    "set_scheduler",
    "reset_singletons",
    # Events
    "Event",
    "MessageEvent",
    "CloseEvent",
    "create_event",
    "create_message_event",
    "create_close_event",
    "EventDispatcher",
    # Connection
    "ConnectionEntry",
    "ConnectionRegistry",
    "normalize_url",
    # Broadcasting
    "RoomBroadcaster",
    "SocketBroadcast",
    "dedupe",
]
