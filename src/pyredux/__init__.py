"""pyredux - Thread-safe Redux-style state container."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyredux")
except PackageNotFoundError:
    __version__ = "0+local"
from pyredux.config import CommandPolicy, StoreConfig
from pyredux.exceptions import (
    MissingCommandHandlerError,
    ReduxConfigError,
    ReduxError,
    ReentrancyError,
    StoreClosedError,
)
from pyredux.reducer import Reducer, ReducerProvider
from pyredux.store import Store
from pyredux.stream import StateStream
from pyredux.subscriber import (
    CallbackSubscriber,
    CommandCallbackSubscriber,
    StoreSubscriber,
    Subscription,
)

__all__ = [
    "__version__",
    "CallbackSubscriber",
    "CommandCallbackSubscriber",
    "CommandPolicy",
    "MissingCommandHandlerError",
    "Reducer",
    "ReducerProvider",
    "ReduxConfigError",
    "ReduxError",
    "ReentrancyError",
    "StateStream",
    "Store",
    "StoreClosedError",
    "StoreConfig",
    "StoreSubscriber",
    "Subscription",
]
