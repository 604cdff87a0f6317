"""Async-iterator adapter over store subscriptions.

Each ``async for`` over a :class:`StateStream` subscribes to the store when
iteration starts and unsubscribes when it ends, whether by ``break``,
``aclose()``, an exception or task cancellation.  The stream is lazy and
restartable: iterating it again opens a fresh subscription.

Leaving an ``async for`` with ``break`` only closes the underlying async
generator once it is finalized.  Wrap the iterator in
:func:`contextlib.aclosing` to unsubscribe immediately::

    async with contextlib.aclosing(aiter(store.stream())) as states:
        async for state in states:
            ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from pyredux.store import Store

_logger = logging.getLogger(__name__)

S = TypeVar("S")


class StateStream(Generic[S]):
    """Push-based stream of store states for asyncio consumers.

    The first item is always the state current at subscription time.
    States dispatched from other threads are handed to the consuming
    event loop with ``call_soon_threadsafe``.

    Parameters
    ----------
    store : Store
        Store to observe.
    max_buffer : int
        Maximum number of undelivered states kept per iteration.  When
        full, the oldest buffered state is dropped.  ``0`` means unbounded.
    """

    def __init__(self, store: Store[S, Any, Any], *, max_buffer: int = 0) -> None:
        if max_buffer < 0:
            raise ValueError("max_buffer must be >= 0")
        self._store = store
        self._max_buffer = max_buffer

    def __aiter__(self) -> AsyncIterator[S]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[S]:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[S] = asyncio.Queue()

        def on_new_state(state: S) -> None:
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(self._push, queue, state)

        subscription = self._store.subscribe(on_new_state)
        try:
            while True:
                yield await queue.get()
        finally:
            self._store.unsubscribe(subscription)

    def _push(self, queue: asyncio.Queue[S], state: S) -> None:
        if self._max_buffer and queue.qsize() >= self._max_buffer:
            queue.get_nowait()
            _logger.debug("State stream buffer full (%d); dropped oldest state", self._max_buffer)
        queue.put_nowait(state)
