#!/usr/bin/env python3
"""Consume store states as an async stream.

A background thread dispatches ticks while an asyncio consumer iterates
``store.stream()`` until the counter reaches the requested value.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
import threading
import time
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyredux import Store  # noqa: E402


def reducer(state: int, action: str) -> int:
    return state + 1 if action == "tick" else state


def _ticker(store: Store[int, str, None], count: int, interval: float) -> None:
    for _ in range(count):
        time.sleep(interval)
        store.dispatch("tick")


async def run(count: int, interval: float) -> None:
    store: Store[int, str, None] = Store(0, reducer)
    producer = threading.Thread(target=_ticker, args=(store, count, interval), daemon=True)

    async with contextlib.aclosing(aiter(store.stream())) as states:
        producer.start()
        async for state in states:
            print(f"state: {state}")
            if state >= count:
                break
    producer.join()


def main() -> None:
    parser = argparse.ArgumentParser(description="Print store states pushed from another thread.")
    parser.add_argument("--count", type=int, default=5, help="Number of ticks to dispatch")
    parser.add_argument("--interval", type=float, default=0.2, help="Seconds between ticks")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    asyncio.run(run(args.count, args.interval))


if __name__ == "__main__":
    main()
