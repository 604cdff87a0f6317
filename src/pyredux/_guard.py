"""Reentrancy guard for reducer execution.

Tracks, per logical execution context, which stores are currently running
a reducer.  The bookkeeping lives in a :class:`contextvars.ContextVar`, so
every thread and every asyncio task sees its own value.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from contextvars import ContextVar

from pyredux.exceptions import ReentrancyError

_reducing_guards: ContextVar[frozenset[DispatchGuard]] = ContextVar(
    "pyredux_reducing_guards",
    default=frozenset(),
)

_MESSAGES: dict[str, str] = {
    "dispatch": "Reducers may not dispatch actions. They should be pure functions with no side effects.",
    "dispatch_thunk": "Reducers may not dispatch action creators. They should be pure functions with no side effects.",
    "dispatch_async": "Reducers may not launch async tasks. They should be pure functions with no side effects.",
    "get_state": (
        "Reducers may not call store.get_state(). The reducer has already received the state "
        "as an argument; pass it down from the root reducer instead of reading it from the store."
    ),
    "subscribe": "Reducers may not call store.subscribe(). They should be pure functions with no side effects.",
    "unsubscribe": "Reducers may not call store.unsubscribe(). They should be pure functions with no side effects.",
    "send_command": "Reducers may not send commands. They should be pure functions with no side effects.",
}


class DispatchGuard:
    """Idle/Reducing state machine for one store, per execution context."""

    @property
    def is_reducing(self) -> bool:
        """Whether the current execution context is inside this store's reducer."""
        return self in _reducing_guards.get()

    def check(self, operation: str) -> None:
        """Raise :class:`ReentrancyError` if *operation* is called from a reducer."""
        if self.is_reducing:
            message = _MESSAGES.get(operation, f"Reducers may not call store.{operation}().")
            raise ReentrancyError(message, operation=operation)

    @contextlib.contextmanager
    def reducing(self) -> Iterator[None]:
        """Mark the current context as reducing for the duration of the block."""
        token = _reducing_guards.set(_reducing_guards.get() | {self})
        try:
            yield
        finally:
            _reducing_guards.reset(token)
