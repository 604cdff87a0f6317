from __future__ import annotations

from pyredux._registry import SubscriberRegistry
from pyredux.subscriber import Subscription


def test_snapshot_is_unaffected_by_later_changes() -> None:
    registry = SubscriberRegistry()
    first = Subscription(subscriber="a")
    second = Subscription(subscriber="b")
    registry.add(first)

    snapshot = registry.snapshot()
    registry.add(second)
    registry.remove(first)

    assert snapshot == (first,)
    assert registry.snapshot() == (second,)


def test_remove_reports_whether_present() -> None:
    registry = SubscriberRegistry()
    subscription = Subscription(subscriber="a")
    registry.add(subscription)

    assert registry.remove(subscription) is True
    assert registry.remove(subscription) is False
    assert len(registry) == 0


def test_handles_are_distinct_for_same_subscriber() -> None:
    first = Subscription(subscriber="a")
    second = Subscription(subscriber="a")

    assert first != second
    assert first.id < second.id
