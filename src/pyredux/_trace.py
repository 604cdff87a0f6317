"""Execution-context labels for diagnostics logging."""

from __future__ import annotations

import asyncio
import threading


def current_context_label() -> str:
    """Describe the calling thread and, if any, the running asyncio task."""
    thread = threading.current_thread().name
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is None:
        return thread
    return f"{thread}/{task.get_name()}"
