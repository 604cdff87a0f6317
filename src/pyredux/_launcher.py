"""Scheduling of ``dispatch_async`` tasks.

Coroutine functions run on an asyncio event loop: the caller's running
loop when there is one, otherwise a background loop thread owned by the
launcher.  Plain functions run on a thread pool.  Either way the submitting
thread never blocks, and task faults are left on the returned future.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from pyredux.exceptions import StoreClosedError

_logger = logging.getLogger(__name__)

TaskHandle = asyncio.Task[Any] | concurrent.futures.Future[Any]


class AsyncTaskLauncher:
    """Runs multi-step task functions without blocking their submitter."""

    def __init__(
        self,
        *,
        max_workers: int | None = None,
        thread_name_prefix: str = "pyredux",
    ) -> None:
        self._max_workers = max_workers
        self._thread_name_prefix = thread_name_prefix
        self._lock = threading.Lock()
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread: threading.Thread | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def launch(
        self,
        task_fn: Callable[..., Any],
        *args: Any,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> TaskHandle:
        """Schedule ``task_fn(*args)`` and return a handle to its completion.

        Returns an :class:`asyncio.Task` when the coroutine is scheduled on
        the loop running in the calling thread, and a
        :class:`concurrent.futures.Future` otherwise.
        """
        if self._closed:
            raise StoreClosedError("Store is closed; cannot launch async tasks")

        if not inspect.iscoroutinefunction(task_fn):
            return self._ensure_executor().submit(task_fn, *args)

        try:
            running: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        target = loop or running or self._ensure_loop()
        coro = task_fn(*args)
        if target is running:
            return target.create_task(coro)
        try:
            return asyncio.run_coroutine_threadsafe(coro, target)
        except BaseException:
            coro.close()
            raise

    def close(self, *, wait: bool = True) -> None:
        """Stop accepting tasks and release the pool and background loop.

        With ``wait=True`` running pool tasks and pending background-loop
        tasks are allowed to finish first.  Tasks scheduled on a caller's
        own loop are not affected.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            executor, self._executor = self._executor, None
            loop, self._loop = self._loop, None
            loop_thread, self._loop_thread = self._loop_thread, None

        if executor is not None:
            _logger.debug("Shutting down task pool wait=%s", wait)
            executor.shutdown(wait=wait)

        if loop is None or loop_thread is None:
            return
        on_loop_thread = threading.current_thread() is loop_thread
        if wait and not on_loop_thread:
            asyncio.run_coroutine_threadsafe(_drain(), loop).result()
        loop.call_soon_threadsafe(loop.stop)
        if on_loop_thread:
            return
        loop_thread.join()

    def _ensure_executor(self) -> concurrent.futures.ThreadPoolExecutor:
        with self._lock:
            if self._closed:
                raise StoreClosedError("Store is closed; cannot launch async tasks")
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix=self._thread_name_prefix,
                )
                _logger.debug("Task pool started max_workers=%s", self._max_workers)
            return self._executor

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._closed:
                raise StoreClosedError("Store is closed; cannot launch async tasks")
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=_run_loop,
                    args=(loop,),
                    name=f"{self._thread_name_prefix}-loop",
                    daemon=True,
                )
                thread.start()
                self._loop = loop
                self._loop_thread = thread
                _logger.debug("Background event loop started thread=%s", thread.name)
            return self._loop


def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
    asyncio.set_event_loop(loop)
    try:
        loop.run_forever()
    finally:
        loop.close()
        _logger.debug("Background event loop stopped")


async def _drain() -> None:
    current = asyncio.current_task()
    pending = [t for t in asyncio.all_tasks() if t is not current]
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
