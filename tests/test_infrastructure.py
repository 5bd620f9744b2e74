"""
Tests for scheduling, global binding, default collaborators and config.
"""

import asyncio
import json
import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from mock_socket import (
    AsyncioScheduler,
    ConnectionRegistry,
    ManualScheduler,
    get_registry,
    get_scheduler,
    reset_singletons,
    set_scheduler,
)
from mock_socket.components.core.binding import Binding, install, uninstall
from mock_socket.config.logging import (
    DevelopmentFormatter,
    StructuredFormatter,
    StructuredLogger,
    get_logger,
    setup_logging,
)
from mock_socket.config.settings import Settings
from mock_socket.utils.exceptions import AddressInUseError, ConstructionError, MockSocketError


class TestManualScheduler:
    """Tests for ManualScheduler."""

    def test_runs_in_fifo_order(self):
        scheduler = ManualScheduler()
        calls = []
        for index in range(3):
            scheduler.call_later(lambda index=index: calls.append(index))

        assert scheduler.pending == 3
        assert scheduler.run_pending() == 3
        assert calls == [0, 1, 2]
        assert scheduler.pending == 0

    def test_callbacks_queued_while_draining_run_too(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(lambda: scheduler.call_later(lambda: calls.append("nested")))

        assert scheduler.run_pending() == 2
        assert calls == ["nested"]

    def test_runaway_rescheduling_is_stopped(self):
        scheduler = ManualScheduler(max_callbacks=5)

        def reschedule():
            scheduler.call_later(reschedule)

        scheduler.call_later(reschedule)

        with pytest.raises(RuntimeError, match="ran 5 callbacks"):
            scheduler.run_pending()

    def test_exception_leaves_rest_queued(self):
        scheduler = ManualScheduler()
        later = MagicMock()
        scheduler.call_later(MagicMock(side_effect=ValueError("boom")))
        scheduler.call_later(later)

        with pytest.raises(ValueError):
            scheduler.run_pending()

        later.assert_not_called()
        assert scheduler.pending == 1

    def test_clear(self):
        scheduler = ManualScheduler()
        callback = MagicMock()
        scheduler.call_later(callback)

        scheduler.clear()

        assert scheduler.run_pending() == 0
        callback.assert_not_called()


class TestAsyncioScheduler:
    """Tests for AsyncioScheduler."""

    def test_default_delay_from_settings(self):
        assert AsyncioScheduler().delay == pytest.approx(0.004)

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().call_later(MagicMock())

    @pytest.mark.asyncio
    async def test_callback_runs_after_current_turn(self):
        scheduler = AsyncioScheduler(delay=0)
        calls = []

        scheduler.call_later(lambda: calls.append("deferred"))
        calls.append("sync")
        await asyncio.sleep(0.01)

        assert calls == ["sync", "deferred"]


class TestBinding:
    """Tests for install()/uninstall()."""

    def test_install_and_restore_missing(self):
        target = SimpleNamespace()

        token = install(target, "WebSocket", int)

        assert target.WebSocket is int
        assert isinstance(token, Binding)
        assert not token.had_previous
        uninstall(token)
        assert not hasattr(target, "WebSocket")

    def test_install_and_restore_previous(self):
        target = SimpleNamespace(WebSocket=str)

        token = install(target, "WebSocket", int)
        uninstall(token)

        assert target.WebSocket is str

    def test_uninstall_twice(self):
        target = SimpleNamespace()
        token = install(target, "WebSocket", int)

        uninstall(token)
        uninstall(token)

        assert not hasattr(target, "WebSocket")


class TestDependencies:
    """Tests for the default collaborator singletons."""

    def test_registry_singleton(self):
        assert get_registry() is get_registry()
        assert isinstance(get_registry(), ConnectionRegistry)

    def test_reset_creates_new_instances(self):
        registry = get_registry()
        scheduler = get_scheduler()

        reset_singletons()

        assert get_registry() is not registry
        assert get_scheduler() is not scheduler

    def test_default_scheduler_is_asyncio(self):
        assert isinstance(get_scheduler(), AsyncioScheduler)

    def test_set_scheduler(self):
        manual = ManualScheduler()

        set_scheduler(manual)
        assert get_scheduler() is manual

        set_scheduler(None)
        assert isinstance(get_scheduler(), AsyncioScheduler)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("MOCK_SOCKET_CONNECT_DELAY", "MOCK_SOCKET_ENVIRONMENT", "MOCK_SOCKET_GLOBAL_ATTRIBUTE"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.connect_delay == pytest.approx(0.004)
        assert config.global_attribute == "WebSocket"
        assert config.default_socketio_url == "socket.io"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MOCK_SOCKET_CONNECT_DELAY", "0.5")
        monkeypatch.setenv("MOCK_SOCKET_ENVIRONMENT", "test")

        config = Settings(_env_file=None)

        assert config.connect_delay == pytest.approx(0.5)
        assert config.should_log_connection_errors is False

    def test_log_connection_errors_switch(self):
        config = Settings(_env_file=None, environment="development", log_connection_errors=False)

        assert config.should_log_connection_errors is False


class TestLogging:
    """Tests for structured logging helpers."""

    def _record(self, **extra_data):
        record = logging.LogRecord("mock_socket.test", logging.ERROR, __file__, 1, "connection failed", (), None)
        record.extra_data = extra_data or None
        return record

    def test_get_logger_is_structured(self):
        assert isinstance(get_logger("mock_socket.test"), StructuredLogger)

    def test_keyword_arguments_become_extra_data(self, caplog):
        logger = get_logger("mock_socket.test")

        with caplog.at_level(logging.DEBUG, logger="mock_socket.test"):
            logger.debug("Server bound", url="ws://localhost/")

        assert caplog.records[-1].extra_data == {"url": "ws://localhost/"}

    def test_structured_formatter(self):
        output = json.loads(StructuredFormatter().format(self._record(url="ws://x/")))

        assert output["level"] == "ERROR"
        assert output["message"] == "connection failed"
        assert output["data"] == {"url": "ws://x/"}

    def test_setup_logging_configures_package_logger(self):
        package_logger = logging.getLogger("mock_socket")
        saved = (package_logger.level, list(package_logger.handlers))
        try:
            setup_logging(logging.WARNING)

            assert package_logger.level == logging.WARNING
            assert len(package_logger.handlers) == 1
            assert isinstance(package_logger.handlers[0].formatter, (DevelopmentFormatter, StructuredFormatter))
        finally:
            package_logger.setLevel(saved[0])
            package_logger.handlers[:] = saved[1]

    def test_development_formatter(self):
        output = DevelopmentFormatter().format(self._record(url="ws://x/"))

        assert "connection failed" in output
        assert "url=ws://x/" in output


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_family(self):
        assert issubclass(ConstructionError, MockSocketError)
        assert issubclass(ConstructionError, TypeError)
        assert issubclass(AddressInUseError, OSError)

    def test_context_is_kept(self):
        error = AddressInUseError("ws://localhost/")

        assert error.detail == "A mock server is already listening on this url"
        assert error.context == {"url": "ws://localhost/"}
        assert str(error) == error.detail

    def test_construction_message(self):
        error = ConstructionError("WebSocket")

        assert str(error) == "Failed to construct 'WebSocket': 1 argument required, but only 0 present."
