"""Thread-safe single-writer state container."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pyredux._guard import DispatchGuard
from pyredux._launcher import AsyncTaskLauncher, TaskHandle
from pyredux._registry import SubscriberRegistry
from pyredux._trace import current_context_label
from pyredux.config import CommandPolicy, StoreConfig
from pyredux.exceptions import MissingCommandHandlerError
from pyredux.reducer import Reducer, ReducerProvider, resolve_reducer
from pyredux.subscriber import CallbackSubscriber, CommandCallbackSubscriber, Subscription

if TYPE_CHECKING:
    from pyredux.stream import StateStream

_logger = logging.getLogger(__name__)

S = TypeVar("S")
A = TypeVar("A")
C = TypeVar("C")
R = TypeVar("R")


class Store(Generic[S, A, C]):
    """Redux-style store that holds the application state.

    All state changes go through :meth:`dispatch`, which runs the reducer
    under a lock and notifies subscribers when the result differs from the
    current state.  Every public method is safe to call from any thread.

    Notifications for a dispatch are delivered while the dispatch lock is
    still held, so subscribers always observe states in commit order, even
    under concurrent dispatch.  A slow subscriber therefore delays other
    dispatchers.

    Usage::

        store = Store(AppState(count=0), reducer)
        handle = store.subscribe(lambda state: print(state))
        store.dispatch(Increment())
        store.unsubscribe(handle)
    """

    def __init__(
        self,
        initial_state: S,
        reducer: Reducer[S, A] | ReducerProvider[S, A],
        *,
        config: StoreConfig | None = None,
        debug: bool | None = None,
    ) -> None:
        self._config = config or StoreConfig()
        self._debug = self._config.debug if debug is None else debug
        self._reducer = resolve_reducer(reducer)
        self._state = initial_state
        self._lock = threading.RLock()
        self._guard = DispatchGuard()
        self._registry = SubscriberRegistry()
        self._launcher = AsyncTaskLauncher(
            max_workers=self._config.max_workers,
            thread_name_prefix=self._config.thread_name_prefix,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> Store[S, A, C]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self, *, wait: bool = True) -> None:
        """Shut down the async task launcher.  Idempotent."""
        self._launcher.close(wait=wait)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def subscriber_count(self) -> int:
        return len(self._registry)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> S:
        """The current state.  Same as :meth:`get_state`."""
        return self.get_state()

    def get_state(self) -> S:
        """Return the latest published state snapshot."""
        self._guard.check("get_state")
        return self._state

    def dispatch(self, action: A) -> A:
        """Dispatch an action.  It is the only way to trigger a state change.

        The reducer computes the next state; if it is not equal to the
        current one, the new state is published and every subscriber's
        ``on_new_state`` is called in subscription order.  Reducer errors
        propagate to the caller and leave the state unchanged.

        Returns
        -------
        action
            The dispatched action, unchanged.
        """
        self._guard.check("dispatch")
        if self._debug:
            self._trace("dispatch: action = %r", action)

        with self._lock:
            current = self._state
            with self._guard.reducing():
                new_state = self._reducer(current, action)

            if new_state == current:
                if self._debug:
                    self._trace("dispatch: state did not change")
                return action

            self._state = new_state
            if self._debug:
                self._trace("dispatch: new state = %r", new_state)

            for subscription in self._registry.snapshot():
                subscription.subscriber.on_new_state(new_state)

        return action

    def dispatch_thunk(self, action_creator: Callable[[Store[S, A, C]], R]) -> R:
        """Run *action_creator* with this store and return its result.

        Convenient for synchronous logic that reads state and dispatches
        several actions.
        """
        self._guard.check("dispatch_thunk")
        return action_creator(self)

    def dispatch_async(
        self,
        task_fn: Callable[[Callable[[A], A], Callable[[], S]], Any],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> TaskHandle:
        """Run multi-step logic concurrently without blocking the caller.

        *task_fn* is called as ``task_fn(dispatch, get_state)`` with this
        store's bound methods.  Coroutine functions run on *loop*, the
        caller's running loop, or a background loop owned by the store;
        plain functions run on the store's thread pool.

        Errors raised by the task are not handled by the store.  They
        surface through the returned task or future.
        """
        self._guard.check("dispatch_async")
        if self._debug:
            self._trace("dispatch_async: task = %r", task_fn)
        return self._launcher.launch(task_fn, self.dispatch, self.get_state, loop=loop)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        subscriber: Any,
        *,
        on_command: Callable[[C], Any] | None = None,
    ) -> Subscription:
        """Subscribe to state changes.

        *subscriber* is an object with ``on_new_state(state)`` (and
        optionally ``on_command_received(command)``), or a plain callable
        taking the state.  For callables, *on_command* receives commands.

        The subscriber is immediately notified with the current state
        before this method returns, and before any command can reach it.
        If that first notification raises, the subscriber is not registered
        and the error propagates.

        Returns
        -------
        Subscription
            Handle to pass to :meth:`unsubscribe`.
        """
        self._guard.check("subscribe")
        if not hasattr(subscriber, "on_new_state"):
            if not callable(subscriber):
                raise TypeError(f"Subscriber must define on_new_state() or be callable, got {subscriber!r}")
            if on_command is not None:
                subscriber = CommandCallbackSubscriber(subscriber, on_command)
            else:
                subscriber = CallbackSubscriber(subscriber)
        elif on_command is not None:
            raise TypeError("on_command is only supported for callable subscribers")

        if self._debug:
            self._trace("subscribe: subscriber = %r", subscriber)

        subscription = Subscription(subscriber)
        with self._lock:
            subscriber.on_new_state(self._state)
            self._registry.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Cancel a subscription.  Unknown or removed handles are ignored."""
        self._guard.check("unsubscribe")
        if self._debug:
            self._trace("unsubscribe: subscription = %r", subscription)
        self._registry.remove(subscription)

    def stream(self, *, max_buffer: int = 0) -> StateStream[S]:
        """Return a restartable async iterable of states."""
        from pyredux.stream import StateStream

        return StateStream(self, max_buffer=max_buffer)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def send_command(self, command: C) -> C:
        """Send a one-time command to current subscribers.

        Commands are not stored in the state, which makes them suitable for
        fire-and-forget side effects such as navigation or notifications.
        Each subscriber's ``on_command_received`` is called in subscription
        order.

        Raises
        ------
        MissingCommandHandlerError
            Under ``CommandPolicy.RAISE``, after delivery to every capable
            subscriber, if exactly one subscriber could not handle the
            command.  Several offenders are raised together in an
            :class:`ExceptionGroup`.
        """
        self._guard.check("send_command")
        if self._debug:
            self._trace("send_command: command = %r", command)

        missing: list[MissingCommandHandlerError] = []
        for subscription in self._registry.snapshot():
            subscriber = subscription.subscriber
            handler = getattr(subscriber, "on_command_received", None)
            if handler is not None:
                handler(command)
                continue
            if self._config.command_policy is CommandPolicy.IGNORE:
                continue
            missing.append(
                MissingCommandHandlerError(
                    "A command has been sent, but the subscriber does not implement "
                    f"on_command_received(). Command = {command!r}, Subscriber = {subscriber!r}",
                    command=command,
                    subscriber=subscriber,
                )
            )

        if len(missing) == 1:
            raise missing[0]
        if missing:
            raise ExceptionGroup(f"{len(missing)} subscribers cannot handle command {command!r}", missing)
        return command

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _trace(self, msg: str, *args: Any) -> None:
        _logger.debug("(%s) " + msg, current_context_label(), *args)
