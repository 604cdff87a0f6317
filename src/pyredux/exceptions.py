"""Custom exception hierarchy for pyredux."""

from __future__ import annotations

from typing import Any


class ReduxError(Exception):
    """Base exception for all pyredux errors."""


class ReduxConfigError(ReduxError, ValueError):
    """Invalid or unparsable configuration."""


class ReentrancyError(ReduxError, RuntimeError):
    """A store operation was invoked from inside a reducer on the same store.

    Reducers receive the current state as an argument and must be pure, so
    reading, dispatching, subscribing or sending commands from within one is
    always a programming error.  The store stays valid after this is raised.
    """

    def __init__(self, message: str, *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(message)


class MissingCommandHandlerError(ReduxError, NotImplementedError):
    """A command was sent to a subscriber without ``on_command_received``.

    Only raised under :attr:`pyredux.config.CommandPolicy.RAISE`.
    """

    def __init__(self, message: str, *, command: Any = None, subscriber: Any = None) -> None:
        self.command = command
        self.subscriber = subscriber
        super().__init__(message)


class StoreClosedError(ReduxError):
    """The store was closed and can no longer launch async tasks."""
