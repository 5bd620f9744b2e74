"""
URL normalization for registry keys.
"""


def normalize_url(url: str) -> str:
    """
    Append a trailing slash when url has a scheme but no path.

    >>> normalize_url("ws://localhost:8080")
    'ws://localhost:8080/'
    >>> normalize_url("ws://localhost:8080/chat")
    'ws://localhost:8080/chat'
    >>> normalize_url("socket.io")
    'socket.io'
    """
    _, separator, rest = url.partition("://")
    if separator and rest and "/" not in rest:
        return f"{url}/"
    return url
