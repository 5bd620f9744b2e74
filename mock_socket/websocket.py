"""
Simulated browser WebSocket client.

Constructing a socket attaches it to the server bound on its URL and
schedules the handshake result, so handlers assigned right after the
constructor returns still see `open` (or `error` + `close`):

    socket = WebSocket("ws://localhost:8080")
    socket.onopen = lambda event: socket.send("hello")
    socket.onmessage = lambda event: print(event.data)

https://developer.mozilla.org/en-US/docs/Web/API/WebSocket
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from mock_socket.components.connection.registry import ConnectionRegistry
from mock_socket.components.connection.urls import normalize_url
from mock_socket.components.core.constants import (
    BINARY_TYPE_BLOB,
    EVENT_CLOSE,
    EVENT_CONNECTION,
    EVENT_ERROR,
    EVENT_MESSAGE,
    EVENT_OPEN,
    CloseCode,
    ReadyState,
)
from mock_socket.components.core.dependencies import get_registry, get_scheduler
from mock_socket.components.core.scheduler import Scheduler
from mock_socket.components.events.dispatcher import EventDispatcher, Listener
from mock_socket.components.events.types import (
    create_close_event,
    create_event,
    create_message_event,
)
from mock_socket.config.logging import connection_logger
from mock_socket.config.settings import settings
from mock_socket.utils.exceptions import ConstructionError, InvalidStateError

if TYPE_CHECKING:
    from mock_socket.server import Server


def _select_protocol(protocol: str | Sequence[str] | None) -> str:
    """A string is used as-is; for a sequence the first entry wins."""
    if isinstance(protocol, str):
        return protocol
    if protocol:
        return str(protocol[0])
    return ""


class ClientSocketBase(EventDispatcher):
    """
    Shared state machine of the simulated clients.

    Subclasses decide what a successful handshake dispatches
    (_handshake_accepted) and how they close.
    """

    CONNECTING = ReadyState.CONNECTING
    OPEN = ReadyState.OPEN
    CLOSING = ReadyState.CLOSING
    CLOSED = ReadyState.CLOSED

    # Used when neither registry= is passed nor a bound subclass sets it
    default_registry: ConnectionRegistry | None = None

    # Name used in error messages and diagnostics
    kind = "WebSocket"

    def __init__(
        self,
        url: str,
        protocol: str | Sequence[str] | None = "",
        *,
        registry: ConnectionRegistry | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        super().__init__()
        if not url:
            raise ConstructionError(self.kind)

        self.binary_type = BINARY_TYPE_BLOB
        self.url = normalize_url(url)
        self.ready_state = ReadyState.CONNECTING
        self.protocol = _select_protocol(protocol)

        if registry is None:
            registry = self.default_registry or get_registry()
        self._registry = registry
        self._scheduler = scheduler if scheduler is not None else get_scheduler()

        self._setup_listeners()

        server = self._registry.attach_socket(self, self.url)
        try:
            self._scheduler.call_later(lambda: self._complete_handshake(server))
        except RuntimeError:
            self._registry.detach_socket(self, self.url)
            raise

    @classmethod
    def bound_to(cls, registry: ConnectionRegistry) -> type:
        """Subclass whose instances default to registry (installed by servers with a private registry)."""
        return type(cls.__name__, (cls,), {"default_registry": registry, "__module__": cls.__module__})

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def server(self) -> "Server | None":
        """Server currently listening on this socket's URL."""
        return self._registry.lookup_server(self.url)

    def _setup_listeners(self) -> None:
        """Hook for listeners registered at construction time."""

    # =========================================================================
    # Handshake
    # =========================================================================

    def _complete_handshake(self, server: "Server | None") -> None:
        if server is None:
            self.ready_state = ReadyState.CLOSED
            self._fail()
            self._log_failure(f"{self.kind} connection to '{self.url}' failed")
            return

        if not server.accepts_client(self):
            self.ready_state = ReadyState.CLOSED
            self._log_failure(
                f"{self.kind} connection to '{self.url}' failed: "
                "HTTP Authentication failed; no valid credentials available"
            )
            self._registry.detach_socket(self, self.url)
            self._fail()
            return

        self.ready_state = ReadyState.OPEN
        self._handshake_accepted(server)

    def _fail(self) -> None:
        self.dispatch(create_event(EVENT_ERROR, target=self))
        self.dispatch(create_close_event(EVENT_CLOSE, code=CloseCode.NORMAL, target=self))

    def _handshake_accepted(self, server: "Server") -> None:
        raise NotImplementedError

    def _log_failure(self, message: str) -> None:
        if settings.should_log_connection_errors:
            connection_logger.error(message, url=self.url, kind=self.kind)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r}, ready_state={self.ready_state.name})"


class WebSocket(ClientSocketBase):
    """
    Browser-style client: listeners receive the full event object.

    Assigning onopen/onmessage/onclose/onerror registers a listener; it
    does not replace earlier ones. Assigning the same callable twice is a
    no-op.
    """

    kind = "WebSocket"

    def _handshake_accepted(self, server: "Server") -> None:
        self.dispatch(create_event(EVENT_OPEN, target=self))
        server.dispatch(create_event(EVENT_CONNECTION), self)

    def send(self, data: Any) -> None:
        """
        Deliver data to the server's `message` listeners on the next turn.

        Without a server the data is silently dropped.

        Raises:
            InvalidStateError: If the socket is CLOSING or CLOSED.
        """
        if self.ready_state in (ReadyState.CLOSING, ReadyState.CLOSED):
            raise InvalidStateError(
                "WebSocket is already in CLOSING or CLOSED state",
                url=self.url,
                ready_state=self.ready_state.name,
            )

        message_event = create_message_event(EVENT_MESSAGE, data=data, origin=self.url)
        server = self.server
        if server is not None:
            self._scheduler.call_later(lambda: server.dispatch(message_event, data))

    def close(self, code: int = CloseCode.NORMAL, reason: str = "") -> None:
        """Close an OPEN socket; any other state is a no-op."""
        if self.ready_state != ReadyState.OPEN:
            return

        server = self.server
        close_event = create_close_event(EVENT_CLOSE, code=code, reason=reason, target=self)
        self._registry.detach_socket(self, self.url)
        self.ready_state = ReadyState.CLOSED
        self.dispatch(close_event)
        if server is not None:
            server.dispatch(close_event)

    # =========================================================================
    # on<event> sugar
    # =========================================================================

    @property
    def onopen(self) -> list[Listener]:
        return self.listeners_for(EVENT_OPEN)

    @onopen.setter
    def onopen(self, listener: Listener) -> None:
        self.on(EVENT_OPEN, listener)

    @property
    def onmessage(self) -> list[Listener]:
        return self.listeners_for(EVENT_MESSAGE)

    @onmessage.setter
    def onmessage(self, listener: Listener) -> None:
        self.on(EVENT_MESSAGE, listener)

    @property
    def onclose(self) -> list[Listener]:
        return self.listeners_for(EVENT_CLOSE)

    @onclose.setter
    def onclose(self, listener: Listener) -> None:
        self.on(EVENT_CLOSE, listener)

    @property
    def onerror(self) -> list[Listener]:
        return self.listeners_for(EVENT_ERROR)

    @onerror.setter
    def onerror(self, listener: Listener) -> None:
        self.on(EVENT_ERROR, listener)
