"""Reducer contract.

A reducer computes the next state from the current state and an action.
The store accepts either a plain callable or an object implementing
:class:`ReducerProvider`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

S = TypeVar("S")
A = TypeVar("A")

Reducer = Callable[[S, A], S]


@runtime_checkable
class ReducerProvider(Protocol[S, A]):
    """Structural interface for objects that provide a root reducer."""

    def root_reducer(self, state: S, action: A) -> S:
        ...


def resolve_reducer(reducer: Reducer[S, A] | ReducerProvider[S, A]) -> Reducer[S, A]:
    """Return the reducer callable for either accepted form."""
    root = getattr(reducer, "root_reducer", None)
    if callable(root):
        return root
    if callable(reducer):
        return reducer
    raise TypeError(f"Reducer must be callable or provide root_reducer(), got {type(reducer).__name__}")
