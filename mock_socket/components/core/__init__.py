"""
Core components: constants, scheduling, global binding, default dependencies.
"""

from mock_socket.components.core.constants import (
    ReadyState,
    CloseCode,
    BINARY_TYPE_BLOB,
)
from mock_socket.components.core.binding import Binding, install, uninstall
from mock_socket.components.core.scheduler import (
    Scheduler,
    AsyncioScheduler,
    ManualScheduler,
)
from mock_socket.components.core.dependencies import (
    get_registry,
    get_scheduler,
    set_scheduler,
    reset_singletons,
)

__all__ = [
    "ReadyState",
    "CloseCode",
    "BINARY_TYPE_BLOB",
    "Binding",
    "install",
    "uninstall",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "get_registry",
    "get_scheduler",
    "set_scheduler",
    "reset_singletons",
]
