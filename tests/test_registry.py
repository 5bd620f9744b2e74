"""
Tests for the connection registry.

Tests verify:
- Server binding and address collisions
- Socket attach/detach and room membership
- Prefix-match lookup fallback
- Property-based invariants with Hypothesis
"""

import pytest
from hypothesis import given, settings, strategies as st

from mock_socket.components.connection.registry import ConnectionRegistry
from mock_socket.components.connection.urls import normalize_url


URL = "ws://localhost:8080/"


class FakeSocket:
    """Identity-only stand-in for a client socket."""

    def __init__(self, url=URL):
        self.url = url

    def __repr__(self):
        return f"FakeSocket({self.url!r})"


@pytest.fixture
def server():
    return object()


@pytest.fixture
def bound(registry, server):
    registry.bind_server(server, URL)
    return registry


class TestBindServer:
    """Tests for bind_server()/unbind_server()."""

    def test_bind_returns_server(self, registry, server):
        assert registry.bind_server(server, URL) is server
        assert registry.lookup_server(URL) is server

    def test_second_bind_fails_and_keeps_first(self, registry, server):
        registry.bind_server(server, URL)

        assert registry.bind_server(object(), URL) is None
        assert registry.lookup_server(URL) is server

    def test_unbind_removes_entry_with_sockets_and_rooms(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)
        bound.join_room(socket, "lobby")

        assert bound.unbind_server(URL) is True
        assert bound.lookup_server(URL) is None
        assert bound.lookup_sockets(URL) == []
        assert bound.lookup_sockets(URL, "lobby") == []

    def test_unbind_unknown_url(self, registry):
        assert registry.unbind_server(URL) is False

    def test_unbind_guarded_by_owner(self, bound, server):
        assert bound.unbind_server(URL, server=object()) is False
        assert bound.lookup_server(URL) is server
        assert bound.unbind_server(URL, server=server) is True

    def test_stats(self, bound):
        bound.attach_socket(FakeSocket(), URL)

        assert bound.get_stats() == {"bound_urls": 1, "attached_sockets": 1, "rooms": 0}


class TestAttachSocket:
    """Tests for attach_socket()/detach_socket()."""

    def test_attach_returns_server(self, bound, server):
        socket = FakeSocket()

        assert bound.attach_socket(socket, URL) is server
        assert bound.lookup_sockets(URL) == [socket]

    def test_attach_without_server(self, registry):
        socket = FakeSocket()

        assert registry.attach_socket(socket, URL) is None
        # Attaching never creates an entry
        assert registry.urls == []

    def test_attach_twice_is_rejected(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)

        assert bound.attach_socket(socket, URL) is None
        assert bound.lookup_sockets(URL) == [socket]

    def test_sockets_keep_insertion_order(self, bound):
        sockets = [FakeSocket() for _ in range(4)]
        for socket in sockets:
            bound.attach_socket(socket, URL)

        assert bound.lookup_sockets(URL) == sockets

    def test_detach_leaves_rooms(self, bound):
        socket, other = FakeSocket(), FakeSocket()
        for item in (socket, other):
            bound.attach_socket(item, URL)
            bound.join_room(item, "lobby")

        bound.detach_socket(socket, URL)

        assert bound.lookup_sockets(URL) == [other]
        assert bound.lookup_sockets(URL, "lobby") == [other]

    def test_detach_is_idempotent(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)

        bound.detach_socket(socket, URL)
        bound.detach_socket(socket, URL)
        bound.detach_socket(FakeSocket(), "ws://nowhere/")

        assert bound.lookup_sockets(URL) == []


class TestRooms:
    """Tests for join_room()/leave_room() and room lookups."""

    def test_join_requires_attachment(self, bound):
        stranger = FakeSocket()

        assert bound.join_room(stranger, "lobby") is False
        assert bound.lookup_sockets(URL, "lobby") == []

    def test_join_twice_duplicates_membership(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)

        bound.join_room(socket, "lobby")
        bound.join_room(socket, "lobby")

        assert bound.lookup_sockets(URL, "lobby") == [socket, socket]

    def test_leave_removes_all_memberships(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)
        bound.join_room(socket, "lobby")
        bound.join_room(socket, "lobby")

        bound.leave_room(socket, "lobby")

        assert bound.lookup_sockets(URL, "lobby") == []
        # Leaving a room does not detach the socket
        assert bound.lookup_sockets(URL) == [socket]

    def test_leave_unknown_room(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)

        bound.leave_room(socket, "nowhere")

        assert bound.rooms_of(socket, URL) == []

    def test_unknown_room_lookup_is_empty_not_everyone(self, bound):
        bound.attach_socket(FakeSocket(), URL)

        assert bound.lookup_sockets(URL, "ghost-room") == []

    def test_lookup_excluding_broadcaster(self, bound):
        sender, receiver = FakeSocket(), FakeSocket()
        for item in (sender, receiver):
            bound.attach_socket(item, URL)
            bound.join_room(item, "lobby")

        assert bound.lookup_sockets(URL, excluding=sender) == [receiver]
        assert bound.lookup_sockets(URL, "lobby", excluding=sender) == [receiver]

    def test_rooms_of(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)
        bound.join_room(socket, "a")
        bound.join_room(socket, "b")

        assert bound.rooms_of(socket, URL) == ["a", "b"]

    def test_lookup_returns_copy(self, bound):
        socket = FakeSocket()
        bound.attach_socket(socket, URL)

        bound.lookup_sockets(URL).clear()

        assert bound.lookup_sockets(URL) == [socket]


class TestPrefixLookup:
    """Tests for the prefix-match fallback."""

    def test_client_url_with_longer_path_finds_server(self, bound, server):
        socket = FakeSocket("ws://localhost:8080/chat/room-1")

        assert bound.attach_socket(socket, socket.url) is server
        assert bound.lookup_sockets(socket.url) == [socket]
        # Same entry, so the server's own URL sees it too
        assert bound.lookup_sockets(URL) == [socket]

    def test_exact_match_preferred_over_prefix(self, registry):
        deep, shallow = object(), object()
        registry.bind_server(deep, "ws://h/chat/x")
        # "ws://h/chat" is not prefixed by the deeper key, so it binds
        assert registry.bind_server(shallow, "ws://h/chat") is shallow

        assert registry.lookup_server("ws://h/chat/x") is deep
        assert registry.lookup_server("ws://h/chat") is shallow

    def test_first_matching_key_only_order_unspecified(self, registry):
        first = object()
        registry.bind_server(first, "ws://h/a")
        # A second server on a longer prefix is rejected: "ws://h/a" already resolves
        assert registry.bind_server(object(), "ws://h/ab") is None
        assert registry.lookup_server("ws://h/abc") is first

    def test_unrelated_url(self, bound):
        assert bound.lookup_server("ws://elsewhere/") is None
        assert bound.lookup_sockets("ws://elsewhere/") == []


class TestNormalizeUrl:
    """Tests for normalize_url()."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("ws://localhost", "ws://localhost/"),
            ("ws://localhost:8080", "ws://localhost:8080/"),
            ("ws://localhost:8080/", "ws://localhost:8080/"),
            ("ws://localhost/chat", "ws://localhost/chat"),
            ("socket.io", "socket.io"),
            ("/chat", "/chat"),
        ],
    )
    def test_normalize(self, url, expected):
        assert normalize_url(url) == expected


class TestRegistryProperties:
    """Property-based tests for registry invariants."""

    @given(operations=st.lists(
        st.tuples(
            st.sampled_from(["attach", "detach", "join", "leave"]),
            st.integers(min_value=0, max_value=4),
            st.sampled_from(["red", "blue"]),
        ),
        max_size=40,
    ))
    @settings(max_examples=100)
    def test_membership_invariants(self, operations):
        """Property: sockets are unique and rooms only hold attached sockets."""
        registry = ConnectionRegistry()
        registry.bind_server(object(), URL)
        sockets = [FakeSocket() for _ in range(5)]

        for action, index, room in operations:
            socket = sockets[index]
            if action == "attach":
                registry.attach_socket(socket, URL)
            elif action == "detach":
                registry.detach_socket(socket, URL)
            elif action == "join":
                registry.join_room(socket, room)
            else:
                registry.leave_room(socket, room)

        attached = registry.lookup_sockets(URL)
        assert len({id(item) for item in attached}) == len(attached)
        for room in ("red", "blue"):
            for member in registry.lookup_sockets(URL, room):
                assert any(member is item for item in attached)

    @given(path=st.text(alphabet="abc/", max_size=10))
    @settings(max_examples=50)
    def test_second_bind_never_replaces_first(self, path):
        """Property: a colliding bind leaves the first server in place."""
        registry = ConnectionRegistry()
        first = object()
        url = f"ws://host/{path}"
        registry.bind_server(first, url)

        assert registry.bind_server(object(), url) is None
        assert registry.lookup_server(url) is first
