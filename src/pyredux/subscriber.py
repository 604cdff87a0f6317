"""Store subscribers and subscription handles."""

from __future__ import annotations

import abc
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

S = TypeVar("S")
C = TypeVar("C")

_subscription_ids = itertools.count(1)


class StoreSubscriber(abc.ABC, Generic[S]):
    """Base class for store subscribers.

    Only :meth:`on_new_state` is required.  Subclasses that want commands
    define ``on_command_received(self, command)``; the store looks it up
    structurally, so any object with these methods works as a subscriber
    without inheriting from this class.
    """

    @abc.abstractmethod
    def on_new_state(self, state: S) -> None:
        """Called with the current state on subscribe and after every change."""


class CallbackSubscriber(Generic[S]):
    """Adapts a plain ``on_new_state`` callable to the subscriber interface.

    Commands are not handled; the store applies its missing-handler policy.
    """

    def __init__(self, on_new_state: Callable[[S], Any]) -> None:
        self._on_new_state = on_new_state

    def on_new_state(self, state: S) -> None:
        self._on_new_state(state)

    def __repr__(self) -> str:
        name = getattr(self._on_new_state, "__qualname__", repr(self._on_new_state))
        return f"{type(self).__name__}({name})"


class CommandCallbackSubscriber(CallbackSubscriber[S], Generic[S, C]):
    """Callback subscriber that also receives commands."""

    def __init__(self, on_new_state: Callable[[S], Any], on_command: Callable[[C], Any]) -> None:
        super().__init__(on_new_state)
        self._on_command = on_command

    def on_command_received(self, command: C) -> None:
        self._on_command(command)


@dataclass(frozen=True, eq=False)
class Subscription:
    """Handle returned by ``Store.subscribe``; pass it to ``Store.unsubscribe``.

    Handles compare by identity: subscribing the same object twice yields
    two independent registrations.
    """

    subscriber: Any
    id: int = field(default_factory=lambda: next(_subscription_ids))

    def __repr__(self) -> str:
        return f"Subscription(id={self.id}, subscriber={self.subscriber!r})"
