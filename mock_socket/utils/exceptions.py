"""
Centralized simulator exceptions for consistent error handling.

Construction and state errors are raised synchronously to the caller.
Simulated transport failures (nobody listening, rejected handshake) are
never raised: they surface as `error` then `close` events on the socket.

Usage:
    from mock_socket.utils.exceptions import InvalidStateError

    raise InvalidStateError("WebSocket is already in CLOSING or CLOSED state", url=url)
"""

from typing import Any

from mock_socket.config.logging import get_logger

logger = get_logger(__name__)


class MockSocketError(Exception):
    """
    Base exception with automatic logging.

    All simulator exceptions inherit from this class so callers can catch
    them as a family, and each one is logged with its structured context.
    """

    def __init__(self, detail: str, log_level: str = "debug", **log_context: Any):
        log_fn = getattr(logger, log_level, logger.debug)
        log_fn(detail, error=type(self).__name__, **log_context)

        self.detail = detail
        self.context = log_context
        super().__init__(detail)


class ConstructionError(MockSocketError, TypeError):
    """
    Missing or malformed constructor argument.

    Usage:
        raise ConstructionError("WebSocket")
        raise ConstructionError("Event", "parameter 'type' must not be empty")
    """

    def __init__(self, constructor: str, problem: str | None = None, **log_context: Any):
        problem = problem or "1 argument required, but only 0 present."
        super().__init__(
            f"Failed to construct '{constructor}': {problem}",
            log_level="debug",
            constructor=constructor,
            **log_context,
        )


class InvalidStateError(MockSocketError, RuntimeError):
    """Operation not allowed in the socket's current ready state."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, log_level="debug", **log_context)


class AddressInUseError(MockSocketError, OSError):
    """A mock server is already bound to the requested URL."""

    def __init__(self, url: str, **log_context: Any):
        super().__init__(
            "A mock server is already listening on this url",
            log_level="warning",
            url=url,
            **log_context,
        )
        self.url = url


class ServerNotFoundError(MockSocketError, LookupError):
    """No server is registered for the URL a socket is addressing."""

    def __init__(self, url: str, **log_context: Any):
        super().__init__(
            f"SocketIO can not find a server at the specified URL ({url})",
            log_level="warning",
            url=url,
            **log_context,
        )
        self.url = url
