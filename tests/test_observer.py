"""Tests for the listener registry."""

import logging
import threading
from unittest.mock import Mock

import pytest

from midilink.utils import ListenerRegistry


@pytest.fixture
def registry():
    return ListenerRegistry[Mock](listener_type_name="test")


@pytest.mark.unit
class TestListenerRegistry:
    """Test registration and notification."""

    def test_register_is_idempotent(self, registry):
        listener = Mock()
        registry.register(listener)
        registry.register(listener)

        assert len(registry) == 1
        assert listener in registry
        assert registry

    def test_unregister_unknown_warns(self, registry, caplog):
        with caplog.at_level(logging.WARNING):
            registry.unregister(Mock())
        assert "unknown test listener" in caplog.text

    def test_notify_calls_every_listener(self, registry):
        first, second = Mock(), Mock()
        registry.register(first)
        registry.register(second)

        registry.notify("received_message", "msg", text="90 3c 40")

        first.received_message.assert_called_once_with("msg", text="90 3c 40")
        second.received_message.assert_called_once_with("msg", text="90 3c 40")

    def test_failing_listener_does_not_stop_others(self, registry, caplog):
        failing = Mock()
        failing.received_message.side_effect = RuntimeError("boom")
        other = Mock()
        registry.register(failing)
        registry.register(other)

        with caplog.at_level(logging.ERROR):
            registry.notify("received_message")

        other.received_message.assert_called_once()
        assert "boom" in caplog.text

    def test_listener_may_unregister_while_notified(self, registry):
        listener = Mock()
        listener.received_message.side_effect = lambda: registry.unregister(listener)
        registry.register(listener)

        registry.notify("received_message")

        assert listener not in registry

    def test_clear(self, registry):
        registry.register(Mock())
        registry.clear()
        assert len(registry) == 0
        assert not registry

    def test_concurrent_registration(self, registry):
        listeners = [Mock() for _ in range(50)]
        threads = [threading.Thread(target=registry.register, args=(listener,)) for listener in listeners]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 50
