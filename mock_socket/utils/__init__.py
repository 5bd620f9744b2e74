"""
Utility module: exception taxonomy and option schemas.
"""

from mock_socket.utils.exceptions import (
    MockSocketError,
    ConstructionError,
    InvalidStateError,
    AddressInUseError,
    ServerNotFoundError,
)
from mock_socket.utils.schemas import ServerOptions

__all__ = [
    # exceptions
    "MockSocketError",
    "ConstructionError",
    "InvalidStateError",
    "AddressInUseError",
    "ServerNotFoundError",
    # schemas
    "ServerOptions",
]
