"""
Broadcast Router for the socket simulator.

Targeted fan-out helpers returned by Server.to()/Server.in_() and by
SocketIO.broadcast:

    server.to("lobby").to("vip").emit("news", payload)
    socket.broadcast.emit("typing", user)
    socket.broadcast.to("lobby").emit("hello")

A target list is resolved when the helper is created. Sockets joining a
room afterwards are not picked up by an already-built helper.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from mock_socket.components.connection.registry import ConnectionRegistry
    from mock_socket.server import Server


# =============================================================================
# Helper Functions
# =============================================================================


def dedupe(sockets: Iterable[Any]) -> list[Any]:
    """Drop repeated socket references, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[Any] = []
    for socket in sockets:
        if id(socket) not in seen:
            seen.add(id(socket))
            unique.append(socket)
    return unique


# =============================================================================
# Room broadcaster
# =============================================================================


class RoomBroadcaster:
    """
    Chainable room selection bound to one server.

    Attributes:
        websockets: Union of the selected rooms' members (deduplicated).
        excluding: Broadcaster socket kept out of every chained room.
    """

    def __init__(self, server: "Server", websockets: list[Any], excluding: Any = None) -> None:
        self._server = server
        self._websockets = websockets
        self.excluding = excluding

    @property
    def websockets(self) -> list[Any]:
        return list(self._websockets)

    def to(self, room: str, excluding: Any = None) -> "RoomBroadcaster":
        """Add room's members to the selection."""
        if excluding is None:
            excluding = self.excluding
        return self._server.to(room, excluding, self._websockets)

    def emit(self, event: str, *data: Any) -> None:
        """Emit event to the selected sockets only."""
        self._server.emit(event, *data, websockets=self._websockets)

    in_ = to

    def __len__(self) -> int:
        return len(self._websockets)

    def __repr__(self) -> str:
        return f"RoomBroadcaster(server={self._server.url!r}, sockets={len(self._websockets)})"


setattr(RoomBroadcaster, "in", RoomBroadcaster.to)


# =============================================================================
# Socket.IO broadcast
# =============================================================================


class SocketBroadcast:
    """
    Fan-out to every socket on a URL except the broadcasting one.

    Built fresh by each SocketIO.broadcast access.
    """

    def __init__(self, server: "Server", registry: "ConnectionRegistry", socket: Any) -> None:
        self._server = server
        self._registry = registry
        self._socket = socket

    def emit(self, event: str, *data: Any) -> None:
        """Emit event to every other socket attached to the broadcaster's URL."""
        websockets = self._registry.lookup_sockets(self._socket.url, excluding=self._socket)
        self._server.emit(event, *data, websockets=websockets)

    def to(self, room: str) -> RoomBroadcaster:
        """Select room members, leaving out the broadcaster."""
        return self._server.to(room, self._socket)

    in_ = to


setattr(SocketBroadcast, "in", SocketBroadcast.to)
