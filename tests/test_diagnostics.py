from __future__ import annotations

import logging
import threading
from typing import Any

import pytest

from pyredux import Store


def _store(debug: bool) -> Store[int, str, str]:
    return Store(0, lambda state, action: state + 1 if action == "increment" else state, debug=debug)


def test_debug_traces_each_call_with_context(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pyredux.store")
    store = _store(debug=True)
    thread_name = threading.current_thread().name

    handle = store.subscribe(lambda state: None, on_command=lambda command: None)
    store.dispatch("increment")
    store.dispatch("noop")
    store.send_command("toast")
    store.unsubscribe(handle)

    messages = [r.getMessage() for r in caplog.records if r.name == "pyredux.store"]
    assert all(m.startswith(f"({thread_name})") for m in messages)
    joined = "\n".join(messages)
    assert "subscribe: subscriber = " in joined
    assert "dispatch: action = 'increment'" in joined
    assert "dispatch: new state = 1" in joined
    assert "dispatch: state did not change" in joined
    assert "send_command: command = 'toast'" in joined
    assert "unsubscribe: subscription = " in joined


def test_no_trace_when_disabled(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pyredux.store")
    store = _store(debug=False)

    store.subscribe(lambda state: None)
    store.dispatch("increment")

    assert [r for r in caplog.records if r.name == "pyredux.store"] == []


@pytest.mark.asyncio
async def test_trace_includes_task_name(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pyredux.store")
    store = _store(debug=True)

    async def task(dispatch: Any, get_state: Any) -> None:
        dispatch("increment")

    handle = store.dispatch_async(task)
    handle.set_name("increment-task")  # type: ignore[union-attr]
    await handle  # type: ignore[misc]

    assert any("/increment-task) dispatch: action" in r.getMessage() for r in caplog.records)
