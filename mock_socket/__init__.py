"""
In-process WebSocket and Socket.IO simulator for tests.

Public API:
- WebSocket: browser-style client
- SocketIO / io / connect: Socket.IO-style client
- Server: listening endpoint with broadcast and rooms
- ConnectionRegistry, AsyncioScheduler, ManualScheduler: injectable collaborators
"""

from mock_socket.components import (
    CloseCode,
    ReadyState,
    ConnectionRegistry,
    AsyncioScheduler,
    ManualScheduler,
    Event,
    MessageEvent,
    CloseEvent,
    get_registry,
    get_scheduler,
    set_scheduler,
    reset_singletons,
)
from mock_socket.server import Server
from mock_socket.socket_io import SocketIO, connect, io
from mock_socket.utils.exceptions import (
    MockSocketError,
    ConstructionError,
    InvalidStateError,
    AddressInUseError,
    ServerNotFoundError,
)
from mock_socket.utils.schemas import ServerOptions
from mock_socket.websocket import WebSocket

__version__ = "0.1.0"

__all__ = [
    # Sockets
    "WebSocket",
    "SocketIO",
    "io",
    "connect",
    "Server",
    "ServerOptions",
    # Constants
    "CloseCode",
    "ReadyState",
    # Events
    "Event",
    "MessageEvent",
    "CloseEvent",
    # Collaborators
    "ConnectionRegistry",
    "AsyncioScheduler",
    "ManualScheduler",
    "get_registry",
    "get_scheduler",
    "set_scheduler",
    "reset_singletons",
    # Errors
    "MockSocketError",
    "ConstructionError",
    "InvalidStateError",
    "AddressInUseError",
    "ServerNotFoundError",
]
