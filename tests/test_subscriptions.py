"""Tests for the subscriber registry: delivery, eviction and leak diagnostics."""

import logging
from unittest.mock import MagicMock

import pytest

from cmdpal.store.subscriptions import SubscriptionRegistry

LOGGER = "cmdpal.store.subscriptions"


class Clock:
    """Manually advanced time source."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class Notifiable:
    def __init__(self):
        self.calls = 0

    def notify(self):
        self.calls += 1


class TestSubscribe:
    """Test registration and removal."""

    def test_subscribe_and_notify(self):
        registry = SubscriptionRegistry()
        listener = MagicMock()
        registry.subscribe(listener)

        assert registry.notify() == 1
        listener.assert_called_once_with()

    def test_object_with_notify_method(self):
        registry = SubscriptionRegistry()
        subscriber = Notifiable()
        registry.subscribe(subscriber)
        registry.notify()
        assert subscriber.calls == 1

    def test_rejects_non_callable(self):
        registry = SubscriptionRegistry()
        with pytest.raises(TypeError):
            registry.subscribe(42)

    def test_same_callback_twice_gets_two_handles(self):
        registry = SubscriptionRegistry()
        listener = MagicMock()
        first = registry.subscribe(listener)
        registry.subscribe(listener)

        assert len(registry) == 2
        registry.notify()
        assert listener.call_count == 2

        first()
        registry.notify()
        assert listener.call_count == 3

    def test_unsubscribe_is_idempotent(self):
        registry = SubscriptionRegistry()
        listener = MagicMock()
        unsubscribe = registry.subscribe(listener)

        unsubscribe()
        unsubscribe()

        assert len(registry) == 0
        registry.notify()
        listener.assert_not_called()

    def test_unsubscribe_does_not_disturb_others(self):
        registry = SubscriptionRegistry()
        a, b = MagicMock(), MagicMock()
        unsubscribe_a = registry.subscribe(a)
        registry.subscribe(b)

        unsubscribe_a()
        registry.notify()

        a.assert_not_called()
        b.assert_called_once()

    def test_handles_are_never_reused(self):
        registry = SubscriptionRegistry()
        registry.subscribe(MagicMock())()
        registry.subscribe(MagicMock())
        assert registry.handles == [1]
        assert 0 not in registry

    def test_unknown_handle_returns_false(self):
        registry = SubscriptionRegistry()
        assert registry.unsubscribe(99) is False

    def test_record_timestamps(self):
        clock = Clock()
        registry = SubscriptionRegistry(clock=clock)
        registry.subscribe(MagicMock())

        record = registry.get(0)
        assert record.mounted_at == 1000.0
        assert record.last_active == 1000.0

        clock.now = 1005.0
        registry.notify()
        assert registry.get(0).last_active == 1005.0
        assert registry.get(0).mounted_at == 1000.0

    def test_clear(self):
        registry = SubscriptionRegistry()
        for _ in range(3):
            registry.subscribe(MagicMock())
        assert registry.clear() == 3
        assert len(registry) == 0


class TestNotify:
    """Test the notify pass under re-entrant changes and failures."""

    def test_delivery_order_is_registration_order(self):
        registry = SubscriptionRegistry()
        calls = []
        registry.subscribe(lambda: calls.append("a"))
        registry.subscribe(lambda: calls.append("b"))
        registry.subscribe(lambda: calls.append("c"))

        registry.notify()
        assert calls == ["a", "b", "c"]

    def test_failing_listener_is_evicted_after_pass(self, caplog):
        registry = SubscriptionRegistry()
        before = MagicMock()
        after = MagicMock()
        registry.subscribe(before)
        registry.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        registry.subscribe(after)

        with caplog.at_level(logging.WARNING, logger=LOGGER):
            delivered = registry.notify()

        assert delivered == 3
        before.assert_called_once()
        after.assert_called_once()
        assert len(registry) == 2
        assert 1 not in registry
        assert "Removed broken listener 1" in caplog.text

        registry.notify()
        assert before.call_count == 2
        assert after.call_count == 2

    def test_listener_removed_mid_pass_is_skipped(self):
        registry = SubscriptionRegistry()
        second = MagicMock()
        handles = {}

        def first():
            handles["second"]()

        registry.subscribe(first)
        handles["second"] = registry.subscribe(second)

        assert registry.notify() == 1
        second.assert_not_called()

    def test_listener_added_mid_pass_waits_for_next_pass(self):
        registry = SubscriptionRegistry()
        late = MagicMock()
        added = []

        def first():
            if not added:
                added.append(registry.subscribe(late))

        registry.subscribe(first)

        assert registry.notify() == 1
        late.assert_not_called()

        registry.notify()
        late.assert_called_once()

    def test_listener_that_unsubscribes_itself_then_fails(self):
        registry = SubscriptionRegistry()
        holder = {}

        def listener():
            holder["unsubscribe"]()
            raise RuntimeError("after unsubscribe")

        holder["unsubscribe"] = registry.subscribe(listener)
        registry.notify()
        assert len(registry) == 0

    def test_empty_registry(self):
        assert SubscriptionRegistry().notify() == 0


class TestLeakDiagnostics:
    """Test threshold logging as the subscriber count grows and shrinks."""

    def test_warning_at_threshold(self, caplog):
        registry = SubscriptionRegistry(warning_threshold=3, critical_threshold=5)
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            for _ in range(2):
                registry.subscribe(MagicMock())
            assert not caplog.records

            registry.subscribe(MagicMock())

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING
        assert "3 listeners" in caplog.records[0].getMessage()

    def test_critical_at_threshold(self, caplog):
        registry = SubscriptionRegistry(warning_threshold=3, critical_threshold=5)
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            for _ in range(5):
                registry.subscribe(MagicMock())

        levels = [record.levelno for record in caplog.records]
        assert levels == [logging.WARNING, logging.ERROR]
        assert "5 listeners" in caplog.records[-1].getMessage()

    def test_default_thresholds(self, caplog):
        registry = SubscriptionRegistry()
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            for _ in range(100):
                registry.subscribe(MagicMock())

        messages = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert len(messages) == 2
        assert messages[0][0] == logging.WARNING and "20 listeners" in messages[0][1]
        assert messages[1][0] == logging.ERROR and "100 listeners" in messages[1][1]

    def test_warning_rearms_after_shrinking(self, caplog):
        registry = SubscriptionRegistry(warning_threshold=2, critical_threshold=10)
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            registry.subscribe(MagicMock())
            unsubscribe = registry.subscribe(MagicMock())
            unsubscribe()
            registry.subscribe(MagicMock())

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2

    def test_shrink_is_logged_at_fixed_sizes(self, caplog):
        registry = SubscriptionRegistry(warning_threshold=50, critical_threshold=60)
        unsubscribes = [registry.subscribe(MagicMock()) for _ in range(21)]

        with caplog.at_level(logging.INFO, logger=LOGGER):
            unsubscribes.pop()()  # 21 -> 20
            unsubscribes.pop()()  # 20 -> 19

        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["Now 19 listeners subscribed to the store"]
