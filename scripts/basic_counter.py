#!/usr/bin/env python3
"""Basic pyredux example.

Shows the minimal setup:
1) define an immutable state model,
2) define actions,
3) write a reducer describing how actions change the state,
4) subscribe to state changes and dispatch.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import BaseModel, ConfigDict  # noqa: E402

from pyredux import Store  # noqa: E402


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int


@dataclass(frozen=True)
class Increment:
    pass


@dataclass(frozen=True)
class Decrement:
    pass


Action = Increment | Decrement


def reducer(state: AppState, action: Action) -> AppState:
    match action:
        case Increment():
            return state.model_copy(update={"count": state.count + 1})
        case Decrement():
            return state.model_copy(update={"count": state.count - 1})
    return state


def main() -> None:
    parser = argparse.ArgumentParser(description="Dispatch a few counter actions and print every new state.")
    parser.add_argument("--start", type=int, default=1, help="Initial counter value")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable store trace logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    store: Store[AppState, Action, None] = Store(AppState(count=args.start), reducer, debug=args.verbose)
    store.subscribe(lambda state: print(f"onNewState: {state}"))

    store.dispatch(Increment())
    store.dispatch(Increment())
    store.dispatch(Decrement())


if __name__ == "__main__":
    main()
