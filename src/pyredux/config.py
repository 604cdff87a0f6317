"""Store configuration for pyredux."""

from __future__ import annotations

import os
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pyredux.exceptions import ReduxConfigError


_TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})


def _env_bool(value: str | None, default: bool) -> bool:
    """Parse a boolean flag; unrecognised or unset values yield *default*."""
    normalized = (value or "").strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


class CommandPolicy(StrEnum):
    """What to do when a subscriber cannot handle a sent command."""

    RAISE = "raise"
    IGNORE = "ignore"


class StoreConfig(BaseModel):
    """Store configuration.

    Parameters
    ----------
    debug : bool
        Log a trace line for every store call, identifying the calling
        thread and asyncio task.  Observational only.
    command_policy : CommandPolicy
        Behaviour when a subscriber without ``on_command_received`` is
        sent a command.  ``RAISE`` fails loudly after delivering to every
        other subscriber; ``IGNORE`` skips the subscriber silently.
    max_workers : int or None
        Worker count of the thread pool used for synchronous
        ``dispatch_async`` tasks.  ``None`` uses the executor default.
    thread_name_prefix : str
        Prefix for worker and background event loop thread names.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    debug: bool = False
    command_policy: CommandPolicy = CommandPolicy.RAISE
    max_workers: int | None = Field(default=None, gt=0)
    thread_name_prefix: str = Field(default="pyredux", min_length=1)

    @field_validator("command_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreConfig:
        """Create configuration from environment variables.

        Reads ``PYREDUX_DEBUG``, ``PYREDUX_COMMAND_POLICY``,
        ``PYREDUX_MAX_WORKERS`` and ``PYREDUX_THREAD_NAME_PREFIX``.
        Explicit keyword arguments override environment values.

        Raises
        ------
        ReduxConfigError
            If a value cannot be parsed or validated.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        if "debug" not in overrides:
            config_kwargs["debug"] = _env_bool(env.get("PYREDUX_DEBUG"), False)

        policy_env = env.get("PYREDUX_COMMAND_POLICY")
        if policy_env is not None and "command_policy" not in overrides:
            config_kwargs["command_policy"] = policy_env

        workers_env = env.get("PYREDUX_MAX_WORKERS")
        if workers_env is not None and "max_workers" not in overrides:
            try:
                config_kwargs["max_workers"] = int(workers_env)
            except ValueError as exc:
                raise ReduxConfigError(f"PYREDUX_MAX_WORKERS is not an integer: {workers_env!r}") from exc

        prefix_env = env.get("PYREDUX_THREAD_NAME_PREFIX")
        if prefix_env is not None and "thread_name_prefix" not in overrides:
            config_kwargs["thread_name_prefix"] = prefix_env

        config_kwargs.update(overrides)

        try:
            return cls(**config_kwargs)
        except ValidationError as exc:
            raise ReduxConfigError(f"Invalid store configuration: {exc}") from exc
