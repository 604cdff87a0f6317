from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyredux import CommandPolicy, ReduxConfigError, Store, StoreConfig


def test_defaults() -> None:
    config = StoreConfig()

    assert config.debug is False
    assert config.command_policy is CommandPolicy.RAISE
    assert config.max_workers is None
    assert config.thread_name_prefix == "pyredux"


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYREDUX_DEBUG", "yes")
    monkeypatch.setenv("PYREDUX_COMMAND_POLICY", " Ignore ")
    monkeypatch.setenv("PYREDUX_MAX_WORKERS", "4")
    monkeypatch.setenv("PYREDUX_THREAD_NAME_PREFIX", "app-store")

    config = StoreConfig.from_env()

    assert config.debug is True
    assert config.command_policy is CommandPolicy.IGNORE
    assert config.max_workers == 4
    assert config.thread_name_prefix == "app-store"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYREDUX_DEBUG", "1")
    monkeypatch.setenv("PYREDUX_MAX_WORKERS", "4")

    config = StoreConfig.from_env(debug=False, max_workers=2)

    assert config.debug is False
    assert config.max_workers == 2


def test_from_env_unknown_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYREDUX_DEBUG", "maybe")

    assert StoreConfig.from_env().debug is False


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PYREDUX_MAX_WORKERS", "many"),
        ("PYREDUX_MAX_WORKERS", "0"),
        ("PYREDUX_COMMAND_POLICY", "explode"),
    ],
)
def test_from_env_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ReduxConfigError):
        StoreConfig.from_env()


def test_config_is_frozen_and_strict() -> None:
    config = StoreConfig()

    with pytest.raises(ValidationError):
        config.debug = True  # type: ignore[misc]
    with pytest.raises(ValidationError):
        StoreConfig(unknown=True)  # type: ignore[call-arg]


def test_store_debug_argument_overrides_config() -> None:
    store = Store(0, lambda state, action: state, config=StoreConfig(debug=True), debug=False)

    assert store.debug is False
    assert store.config.debug is True


def test_from_env_blank_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYREDUX_DEBUG", "  ")

    assert StoreConfig.from_env().debug is False
