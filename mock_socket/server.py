"""
Simulated WebSocket / Socket.IO server.

A server binds its URL in the registry and installs the mock WebSocket
class as the ambient `WebSocket` name, so code under test that builds its
own sockets talks to the simulator. stop() undoes both; call it at the end
of every test.

    server = Server("ws://localhost:8080")
    server.on("connection", lambda socket: socket.send("welcome"))
    server.on("message", lambda data: server.emit("echo", data))
    ...
    server.stop()

https://github.com/websockets/ws#server-example
"""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from mock_socket.components.broadcast.router import RoomBroadcaster, dedupe
from mock_socket.components.connection.registry import ConnectionRegistry
from mock_socket.components.connection.urls import normalize_url
from mock_socket.components.core.binding import Binding, install, uninstall
from mock_socket.components.core.constants import (
    EVENT_CLOSE,
    EVENT_ERROR,
    EVENT_MESSAGE,
    CloseCode,
    ReadyState,
)
from mock_socket.components.core.dependencies import get_registry
from mock_socket.components.events.dispatcher import EventDispatcher
from mock_socket.components.events.types import create_close_event, create_event, create_message_event
from mock_socket.config.logging import get_logger
from mock_socket.config.settings import settings
from mock_socket.utils.exceptions import AddressInUseError, ConstructionError
from mock_socket.utils.schemas import ServerOptions
from mock_socket.websocket import WebSocket

logger = get_logger(__name__)


def _parse_options(options: ServerOptions | Mapping[str, Any] | None) -> ServerOptions:
    if options is None:
        return ServerOptions()
    if isinstance(options, ServerOptions):
        return options
    if not isinstance(options, Mapping):
        raise ConstructionError("Server", "parameter 2 ('options') is not a mapping")
    try:
        return ServerOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ConstructionError("Server", f"invalid options: {exc.errors()[0]['msg']}") from exc


class Server(EventDispatcher):
    """
    Listening endpoint bound to one URL.

    Server listeners receive:
    - "connection"/"connect": the client socket
    - "message" and custom Socket.IO events: the raw payload arguments
    - "close"/"disconnect": the close event (event.target is the client)
    """

    def __init__(
        self,
        url: str,
        options: ServerOptions | Mapping[str, Any] | None = None,
        *,
        registry: ConnectionRegistry | None = None,
        target: Any = None,
        attribute: str | None = None,
    ) -> None:
        """
        Bind url and install the mock WebSocket globally.

        Args:
            url: Address to listen on (normalized).
            options: ServerOptions or a mapping with "verify_client"/"verifyClient".
            registry: Directory to bind in; the process-wide one by default.
            target: Namespace receiving the mock class (builtins by default).
            attribute: Name to install under (settings.global_attribute by default).

        Raises:
            ConstructionError: Empty url or malformed options.
            AddressInUseError: Another server already resolves for url.
        """
        super().__init__()
        if not url:
            raise ConstructionError("Server")

        self.url = normalize_url(url)
        self.options = _parse_options(options)
        self._registry = registry if registry is not None else get_registry()
        self._target = target if target is not None else builtins
        self._attribute = attribute or settings.global_attribute
        self._binding: Binding | None = None

        if self._registry.bind_server(self, self.url) is None:
            self.dispatch(create_event(EVENT_ERROR))
            raise AddressInUseError(self.url)

        self.start()

    @classmethod
    def of(cls, url: str, **kwargs: Any) -> "Server":
        """Socket.IO namespace alias: Server.of("/chat") is Server("/chat")."""
        return cls(url, **kwargs)

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def is_installed(self) -> bool:
        return self._binding is not None

    # =========================================================================
    # Global binding
    # =========================================================================

    def install(self) -> Binding:
        """Install the mock WebSocket class on the target namespace (once)."""
        if self._binding is None:
            socket_class = WebSocket
            if self._registry is not get_registry():
                socket_class = WebSocket.bound_to(self._registry)
            self._binding = install(self._target, self._attribute, socket_class)
        return self._binding

    def uninstall(self, token: Binding | None = None) -> None:
        """Restore what install() replaced. Later calls are no-ops."""
        token = token or self._binding
        if token is None:
            return
        uninstall(token)
        if token is self._binding:
            self._binding = None

    start = install

    def stop(self, callback: Callable[[], Any] | None = None) -> None:
        """
        Restore the global binding, release the URL and run callback.

        Safe to call repeatedly; a later server bound on the same URL is
        left untouched.
        """
        self.uninstall()
        self._registry.unbind_server(self.url, server=self)
        if callback is not None:
            callback()

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    # =========================================================================
    # Connection handling
    # =========================================================================

    def accepts_client(self, socket: Any) -> bool:
        """Run verify_client for an incoming socket; no predicate accepts everyone."""
        verify_client = self.options.verify_client
        if verify_client is None:
            return True
        accepted = bool(verify_client())
        if not accepted:
            logger.debug("Client rejected by verify_client", url=self.url, socket=repr(socket))
        return accepted

    def clients(self) -> list[Any]:
        """Sockets currently attached to this server's URL."""
        return self._registry.lookup_sockets(self.url)

    # =========================================================================
    # Delivery
    # =========================================================================

    def emit(self, event: str, *data: Any, websockets: Iterable[Any] | None = None) -> None:
        """
        Dispatch a message event named event on each target socket.

        A single list/tuple payload, or several positional payloads, are
        spread as listener arguments (Socket.IO multi-argument emit).

        Args:
            event: Event name the sockets' listeners are registered under.
            *data: Payload; one value is delivered as-is.
            websockets: Explicit targets; every attached socket by default.
        """
        if websockets is None:
            websockets = self._registry.lookup_sockets(self.url)

        if not data:
            payload = None
        elif len(data) == 1:
            payload = data[0]
        else:
            payload = list(data)

        for socket in list(websockets):
            message_event = create_message_event(event, data=payload, origin=self.url, target=socket)
            if isinstance(payload, (list, tuple)):
                socket.dispatch(message_event, *payload)
            else:
                socket.dispatch(message_event)

    def send(self, data: Any, *, websockets: Iterable[Any] | None = None) -> None:
        """Emit a plain `message` event."""
        self.emit(EVENT_MESSAGE, data, websockets=websockets)

    def close(self, code: int | None = None, reason: str = "", was_clean: bool | None = None) -> None:
        """
        Shut the server down and close every attached socket.

        The URL is released before any socket is notified, so a close
        handler that reconnects immediately finds nobody listening.
        """
        sockets = self._registry.lookup_sockets(self.url)
        self._registry.unbind_server(self.url, server=self)

        for socket in sockets:
            socket.ready_state = ReadyState.CLOSING
            socket.dispatch(
                create_close_event(
                    EVENT_CLOSE,
                    code=code or CloseCode.NORMAL,
                    reason=reason or "",
                    was_clean=was_clean,
                    target=socket,
                )
            )
            socket.ready_state = ReadyState.CLOSED

        logger.debug("Server closed", url=self.url, closed_sockets=len(sockets))
        self.dispatch(create_close_event(EVENT_CLOSE, target=self))

    # =========================================================================
    # Rooms
    # =========================================================================

    def to(self, room: str, excluding: Any = None, accumulated: Iterable[Any] | None = None) -> RoomBroadcaster:
        """
        Select the members of room (minus excluding) for a targeted emit.

        e.g. server.to("lobby").emit("hi")
        """
        websockets = dedupe([
            *(accumulated or []),
            *self._registry.lookup_sockets(self.url, room, excluding),
        ])
        return RoomBroadcaster(self, websockets, excluding)

    in_ = to

    def __repr__(self) -> str:
        return f"Server(url={self.url!r}, clients={len(self.clients())})"


setattr(Server, "in", Server.to)
