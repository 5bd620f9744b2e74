"""
Default collaborators for sockets and servers.

Every socket and server accepts explicit `registry=` and `scheduler=`
arguments. When omitted, these process-wide singletons are used so that
all sockets created in one test run see the same directory.
"""

from __future__ import annotations

import threading

from mock_socket.components.connection.registry import ConnectionRegistry
from mock_socket.components.core.scheduler import AsyncioScheduler, Scheduler


# =============================================================================
# Singleton Instances
# =============================================================================

_registry: ConnectionRegistry | None = None
_scheduler: Scheduler | None = None
_singleton_lock = threading.Lock()


# =============================================================================
# Component Factories (Thread-safe singletons)
# =============================================================================


def get_registry() -> ConnectionRegistry:
    """
    Get singleton ConnectionRegistry instance.

    Thread-safe with double-check locking.
    """
    global _registry
    if _registry is None:
        with _singleton_lock:
            if _registry is None:
                _registry = ConnectionRegistry()
    return _registry


def get_scheduler() -> Scheduler:
    """
    Get singleton Scheduler instance (AsyncioScheduler unless overridden).

    Thread-safe with double-check locking.
    """
    global _scheduler
    if _scheduler is None:
        with _singleton_lock:
            if _scheduler is None:
                _scheduler = AsyncioScheduler()
    return _scheduler


def set_scheduler(scheduler: Scheduler | None) -> None:
    """Replace the default scheduler (None restores the asyncio default lazily)."""
    global _scheduler
    with _singleton_lock:
        _scheduler = scheduler


# =============================================================================
# Cleanup Functions (for testing)
# =============================================================================


def reset_singletons() -> None:
    """
    Reset all singleton instances.

    Useful for testing to ensure clean state between tests. Servers still
    bound on the old registry are not stopped; stop them first to restore
    the global WebSocket binding.
    """
    global _registry, _scheduler

    with _singleton_lock:
        _registry = None
        _scheduler = None
