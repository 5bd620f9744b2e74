"""
Connection Registry - directory of simulated endpoints.

Maps a normalized URL to the server bound on it, the client sockets
attached to that server, and the named rooms those sockets joined.

Lookup falls back to prefix matching: when no key equals the requested
URL, the first registered key (insertion order) that is a string prefix
of it is used. With several qualifying keys the winner depends on bind
order only; callers should not rely on a particular tie-break.

Execution is single-threaded; the registry holds no locks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from mock_socket.config.logging import get_logger

if TYPE_CHECKING:
    from mock_socket.server import Server

logger = get_logger(__name__)


@dataclass(eq=False)
class ConnectionEntry:
    """
    One bound URL.

    Attributes:
        server: The listening server, or None.
        sockets: Attached client sockets, insertion order, each at most once.
        rooms: Room name -> member sockets (members of `sockets` only).
    """

    server: "Server | None" = None
    sockets: list[Any] = field(default_factory=list)
    rooms: dict[str, list[Any]] = field(default_factory=dict)

    def has_socket(self, socket: Any) -> bool:
        return any(item is socket for item in self.sockets)


def _without(sockets: list[Any], excluded: Any) -> list[Any]:
    return [item for item in sockets if item is not excluded]


class ConnectionRegistry:
    """
    Manages URL -> ConnectionEntry bindings.

    Invariants:
    - A URL has at most one entry; binding a second server fails.
    - Entries are created by bind_server() only, never by attaching a client.
    - A socket can join a room only once it is attached to the entry.

    Read-only properties return immutable views (MappingProxyType).
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._entries: dict[str, ConnectionEntry] = {}

    # =========================================================================
    # Immutable views
    # =========================================================================

    @property
    def entries(self) -> MappingProxyType[str, ConnectionEntry]:
        """Bound entries indexed by URL (immutable view)."""
        return MappingProxyType(self._entries)

    @property
    def urls(self) -> list[str]:
        """Bound URLs in bind order."""
        return list(self._entries)

    # =========================================================================
    # Query methods
    # =========================================================================

    def get_entry(self, url: str) -> ConnectionEntry | None:
        """
        Resolve the entry for url: exact key first, then first prefix key.

        Returns:
            The matching entry, or None.
        """
        entry = self._entries.get(url)
        if entry is not None:
            return entry
        for key, candidate in self._entries.items():
            if url.startswith(key):
                return candidate
        return None

    def lookup_server(self, url: str) -> "Server | None":
        """Find the server running on url (exact or prefix match)."""
        entry = self.get_entry(url)
        return entry.server if entry is not None else None

    def lookup_sockets(self, url: str, room: str | None = None, excluding: Any = None) -> list[Any]:
        """
        Find the sockets listening on url.

        Args:
            url: Normalized URL.
            room: Only return members of this room (empty list for unknown rooms).
            excluding: Socket to leave out, typically the broadcaster itself.

        Returns:
            New list of sockets in attach (or join) order.
        """
        entry = self.get_entry(url)
        if entry is None:
            return []
        sockets = entry.rooms.get(room, []) if room else entry.sockets
        if excluding is not None:
            return _without(sockets, excluding)
        return list(sockets)

    def rooms_of(self, socket: Any, url: str) -> list[str]:
        """Names of the rooms socket currently belongs to on url."""
        entry = self.get_entry(url)
        if entry is None:
            return []
        return [
            room for room, members in entry.rooms.items()
            if any(item is socket for item in members)
        ]

    # =========================================================================
    # Registration methods
    # =========================================================================

    def bind_server(self, server: "Server", url: str) -> "Server | None":
        """
        Bind server to url.

        Returns:
            server on success, None when an entry already resolves for url.
        """
        if self.get_entry(url) is not None:
            logger.debug("Server bind rejected: address in use", url=url)
            return None
        self._entries[url] = ConnectionEntry(server=server)
        logger.debug("Server bound", url=url, bound_urls=len(self._entries))
        return server

    def attach_socket(self, socket: Any, url: str) -> "Server | None":
        """
        Attach a client socket to the server listening on url.

        Returns:
            The server, or None when nobody listens on url or the socket
            is already attached.
        """
        entry = self.get_entry(url)
        if entry is None or entry.server is None or entry.has_socket(socket):
            return None
        entry.sockets.append(socket)
        return entry.server

    def join_room(self, socket: Any, room: str, url: str | None = None) -> bool:
        """
        Add socket to room on its URL.

        Joining twice appends a second membership, so room emissions reach
        the socket twice until it leaves.

        Returns:
            True if the membership was recorded.
        """
        entry = self.get_entry(url if url is not None else socket.url)
        if entry is None or entry.server is None or not entry.has_socket(socket):
            return False
        entry.rooms.setdefault(room, []).append(socket)
        return True

    # =========================================================================
    # Unregistration methods
    # =========================================================================

    def detach_socket(self, socket: Any, url: str) -> None:
        """
        Remove socket from the entry for url and from all of its rooms.

        Idempotent; unknown sockets and URLs are ignored.
        """
        entry = self.get_entry(url)
        if entry is None:
            return
        entry.sockets = _without(entry.sockets, socket)
        for room, members in entry.rooms.items():
            entry.rooms[room] = _without(members, socket)

    def leave_room(self, socket: Any, room: str, url: str | None = None) -> None:
        """Remove every membership of socket in room. Unknown rooms are ignored."""
        entry = self.get_entry(url if url is not None else socket.url)
        if entry is None:
            return
        members = entry.rooms.get(room)
        if members is not None:
            entry.rooms[room] = _without(members, socket)

    def unbind_server(self, url: str, server: "Server | None" = None) -> bool:
        """
        Delete the entry bound on exactly url (server, sockets and rooms).

        Attached sockets are not notified; callers close them first.

        Args:
            url: Exact bound URL.
            server: When given, only unbind if this server owns the entry.

        Returns:
            True if an entry was removed.
        """
        entry = self._entries.get(url)
        if entry is None:
            return False
        if server is not None and entry.server is not server:
            return False
        del self._entries[url]
        logger.debug("Server unbound", url=url, dropped_sockets=len(entry.sockets))
        return True

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    # =========================================================================
    # Utility methods
    # =========================================================================

    def get_stats(self) -> dict[str, int]:
        """Get registry statistics."""
        return {
            "bound_urls": len(self._entries),
            "attached_sockets": sum(len(entry.sockets) for entry in self._entries.values()),
            "rooms": sum(len(entry.rooms) for entry in self._entries.values()),
        }
