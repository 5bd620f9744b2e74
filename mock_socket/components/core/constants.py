"""
Socket Simulator Constants.

Ready states and close codes shared by every socket-like object.
"""

from enum import IntEnum
from typing import Final

__all__ = [
    "ReadyState",
    "CloseCode",
    "BINARY_TYPE_BLOB",
    "EVENT_OPEN",
    "EVENT_MESSAGE",
    "EVENT_CLOSE",
    "EVENT_ERROR",
    "EVENT_CONNECTION",
    "EVENT_CONNECT",
    "EVENT_DISCONNECT",
]


class ReadyState(IntEnum):
    """
    Connection lifecycle shared by WebSocket and SocketIO clients.

    CONNECTING -> OPEN -> CLOSED for a client-initiated close.
    CONNECTING -> CLOSED when nobody is listening or the handshake is rejected.
    OPEN -> CLOSING -> CLOSED only during a server-initiated mass close.
    """

    CONNECTING = 0
    OPEN = 1
    CLOSING = 2
    CLOSED = 3


class CloseCode(IntEnum):
    """
    WebSocket close codes carried by close events.

    Standard codes (1000-1999) from RFC 6455.
    """

    NORMAL = 1000  # Normal closure
    GOING_AWAY = 1001  # Server shutting down or client navigating away
    PROTOCOL_ERROR = 1002  # Protocol error
    UNSUPPORTED = 1003  # Received data type not supported
    NO_STATUS = 1005  # No status code was present
    ABNORMAL = 1006  # Connection dropped without a close frame
    TOO_LARGE = 1009  # Message too large to process


BINARY_TYPE_BLOB: Final[str] = "blob"

# Event names used across the simulator
EVENT_OPEN: Final[str] = "open"
EVENT_MESSAGE: Final[str] = "message"
EVENT_CLOSE: Final[str] = "close"
EVENT_ERROR: Final[str] = "error"
EVENT_CONNECTION: Final[str] = "connection"
EVENT_CONNECT: Final[str] = "connect"
EVENT_DISCONNECT: Final[str] = "disconnect"
