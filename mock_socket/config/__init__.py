"""
Configuration module: settings and logging.
"""

from mock_socket.config.settings import Settings, get_settings, settings
from mock_socket.config.logging import get_logger, setup_logging

__all__ = [
    # settings
    "Settings",
    "get_settings",
    "settings",
    # logging
    "get_logger",
    "setup_logging",
]
