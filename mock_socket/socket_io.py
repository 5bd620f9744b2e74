"""
Simulated Socket.IO client.

Same lifecycle as WebSocket with the Socket.IO vocabulary:
- handshake success fires `connection` and `connect` on the server and
  `connect` on the client (no `open`)
- every `close` is re-dispatched as `disconnect`
- emit() is synchronous and spreads its payload as listener arguments
- listeners get the raw payload (event.data), not the event object

    socket = io("http://localhost:3000")
    socket.on("connect", lambda event: socket.emit("join", "lobby"))
    socket.on("chat", lambda message: print(message))

http://socket.io/docs/
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from mock_socket.components.broadcast.router import RoomBroadcaster, SocketBroadcast
from mock_socket.components.connection.registry import ConnectionRegistry
from mock_socket.components.core.constants import (
    EVENT_CLOSE,
    EVENT_CONNECT,
    EVENT_CONNECTION,
    EVENT_DISCONNECT,
    EVENT_MESSAGE,
    CloseCode,
    ReadyState,
)
from mock_socket.components.core.scheduler import Scheduler
from mock_socket.components.events.dispatcher import Listener
from mock_socket.components.events.types import CloseEvent, Event, create_close_event, create_event, create_message_event
from mock_socket.config.settings import settings
from mock_socket.utils.exceptions import InvalidStateError, ServerNotFoundError
from mock_socket.websocket import ClientSocketBase

if TYPE_CHECKING:
    from mock_socket.server import Server


class SocketIO(ClientSocketBase):
    """Socket.IO-style client with rooms and broadcast."""

    kind = "Socket.io"

    def __init__(
        self,
        url: str | None = None,
        protocol: str | Sequence[str] | None = "",
        *,
        registry: ConnectionRegistry | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        if url is None:
            url = settings.default_socketio_url
        super().__init__(url, protocol, registry=registry, scheduler=scheduler)

    def _setup_listeners(self) -> None:
        self.on(EVENT_CLOSE, self._dispatch_disconnect)

    def _dispatch_disconnect(self, event: CloseEvent) -> None:
        self.dispatch(create_close_event(EVENT_DISCONNECT, code=event.code, target=event.target))

    def _handshake_accepted(self, server: "Server") -> None:
        server.dispatch(create_event(EVENT_CONNECTION), self)
        server.dispatch(create_event(EVENT_CONNECT), self)
        self.dispatch(create_event(EVENT_CONNECT, target=self))

    def _invoke(self, listener: Listener, event: Event, args: tuple[Any, ...]) -> None:
        if args:
            listener(*args)
            return
        payload = getattr(event, "data", None)
        listener(payload if payload is not None else event)

    def _require_open(self) -> None:
        if self.ready_state != ReadyState.OPEN:
            raise InvalidStateError(
                "SocketIO is already in CLOSING or CLOSED state",
                url=self.url,
                ready_state=self.ready_state.name,
            )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close an OPEN socket: `close` + `disconnect` locally, `disconnect` on the server."""
        if self.ready_state != ReadyState.OPEN:
            return

        server = self.server
        self._registry.detach_socket(self, self.url)
        self.ready_state = ReadyState.CLOSED
        self.dispatch(create_close_event(EVENT_CLOSE, code=CloseCode.NORMAL, target=self))
        if server is not None:
            server.dispatch(create_close_event(EVENT_DISCONNECT, code=CloseCode.NORMAL, target=self))

    def disconnect(self) -> None:
        """Alias for close()."""
        self.close()

    # =========================================================================
    # Messaging
    # =========================================================================

    def emit(self, event: str, *data: Any) -> None:
        """
        Dispatch event on the server right away, payload spread as arguments.

        Raises:
            InvalidStateError: If the socket is not OPEN.
        """
        self._require_open()
        message_event = create_message_event(event, data=list(data), origin=self.url)
        server = self.server
        if server is not None:
            server.dispatch(message_event, *data)

    def send(self, data: Any) -> None:
        """Emit a `message` event, like WebSocket.send."""
        self.emit(EVENT_MESSAGE, data)

    @property
    def broadcast(self) -> SocketBroadcast:
        """
        Fan-out to every other socket on this URL.

        e.g. socket.broadcast.emit("hi!")
        e.g. socket.broadcast.to("my-room").emit("hi!")

        Raises:
            InvalidStateError: If the socket is not OPEN.
            ServerNotFoundError: If no server listens on the URL anymore.
        """
        self._require_open()
        server = self.server
        if server is None:
            raise ServerNotFoundError(self.url)
        return SocketBroadcast(server, self._registry, self)

    def to(self, room: str) -> RoomBroadcaster:
        return self.broadcast.to(room)

    in_ = to

    # =========================================================================
    # Listeners and rooms
    # =========================================================================

    def off(self, event_type: str, listener: Listener | None = None) -> None:
        """Remove listener, or every listener of event_type when none is given."""
        if listener is None:
            if event_type in self._listeners:
                self._listeners[event_type] = []
            return
        super().off(event_type, listener)

    def join(self, room: str) -> None:
        """Join a room on the server (joining twice doubles deliveries)."""
        self._registry.join_room(self, room, self.url)

    def leave(self, room: str) -> None:
        self._registry.leave_room(self, room, self.url)

    @property
    def rooms(self) -> list[str]:
        return self._registry.rooms_of(self, self.url)


setattr(SocketIO, "in", SocketIO.to)


def io(url: str | None = None, protocol: str | Sequence[str] | None = "", **kwargs: Any) -> SocketIO:
    """Static constructor, like the `io()` global of the Socket.IO client."""
    return SocketIO(url, protocol, **kwargs)


def connect(url: str | None = None, **kwargs: Any) -> SocketIO:
    """Alias of io()."""
    return io(url, **kwargs)


io.connect = connect  # type: ignore[attr-defined]
