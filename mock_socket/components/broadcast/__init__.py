"""
Broadcasting components: room selection and Socket.IO broadcast fan-out.
"""

from mock_socket.components.broadcast.router import (
    RoomBroadcaster,
    SocketBroadcast,
    dedupe,
)

__all__ = [
    "RoomBroadcaster",
    "SocketBroadcast",
    "dedupe",
]
