"""
Connection management components.

Handles the URL directory: server bindings, attached sockets, rooms.
"""

from mock_socket.components.connection.registry import ConnectionEntry, ConnectionRegistry
from mock_socket.components.connection.urls import normalize_url

__all__ = [
    "ConnectionEntry",
    "ConnectionRegistry",
    "normalize_url",
]
