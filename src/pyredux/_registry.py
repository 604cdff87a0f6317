"""Copy-on-write subscriber registry."""

from __future__ import annotations

import threading

from pyredux.subscriber import Subscription


class SubscriberRegistry:
    """Holds registered subscriptions as an immutable tuple.

    Writers serialize on a private lock and swap in a new tuple; readers
    take :meth:`snapshot` once and iterate it, so notification is never
    disturbed by a concurrent subscribe or unsubscribe.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: tuple[Subscription, ...] = ()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def snapshot(self) -> tuple[Subscription, ...]:
        """Return the current registrations in subscription order."""
        return self._subscriptions

    def add(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions = (*self._subscriptions, subscription)

    def remove(self, subscription: Subscription) -> bool:
        """Remove *subscription*; return ``False`` if it was not registered."""
        with self._lock:
            current = self._subscriptions
            remaining = tuple(s for s in current if s is not subscription)
            if len(remaining) == len(current):
                return False
            self._subscriptions = remaining
            return True
