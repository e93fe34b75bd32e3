from __future__ import annotations

import os

import pytest

from ethfetcher.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_bool,
    env_int,
    get_ledger_config,
    get_resolve_config,
    require_env_var,
    require_env_vars,
)
from ethfetcher.config.ledger import DEFAULT_CALLS_PER_SECOND, DEFAULT_MAX_CONCURRENCY


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_require_env_vars_restores_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEMP_VAR", "123")

    assert os.getenv("TEMP_VAR") == "123"
    assert require_env_var("TEMP_VAR") == "123"


def test_env_int_validates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_INT", raising=False)
    assert env_int("EXAMPLE_INT", 4) == 4

    monkeypatch.setenv("EXAMPLE_INT", "abc")
    with pytest.raises(ConfigurationError):
        env_int("EXAMPLE_INT", 4)

    monkeypatch.setenv("EXAMPLE_INT", "0")
    with pytest.raises(ConfigurationError):
        env_int("EXAMPLE_INT", 4, minimum=1)


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), ("off", False)])
def test_env_bool_parses_flags(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:  # noqa: FBT001
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_bool("EXAMPLE_FLAG", default=not expected) is expected


def test_env_bool_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError):
        env_bool("EXAMPLE_FLAG", default=False)


def test_ledger_config_requires_rpc_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ETHFETCHER_RPC_URL", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_ledger_config()


def test_ledger_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ETHFETCHER_RPC_URL", "http://node.test:8545")
    for name in (
        "ETHFETCHER_MAX_CONCURRENCY",
        "ETHFETCHER_RPC_TIMEOUT_SECONDS",
        "ETHFETCHER_RPC_RATE_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_ledger_config()

    assert config.rpc_url == "http://node.test:8545"
    assert config.max_concurrency == DEFAULT_MAX_CONCURRENCY
    assert config.resilience.base_url == "http://node.test:8545"
    assert config.resilience.ratelimit is not None
    assert config.resilience.ratelimit.max_calls == DEFAULT_CALLS_PER_SECOND
    assert "POST" in config.resilience.retry.allowed_methods


def test_ledger_config_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ETHFETCHER_RPC_URL", "http://node.test:8545")
    monkeypatch.setenv("ETHFETCHER_MAX_CONCURRENCY", "2")
    monkeypatch.setenv("ETHFETCHER_RPC_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("ETHFETCHER_RPC_RATE_LIMIT", "0")

    config = get_ledger_config()

    assert config.max_concurrency == 2
    assert config.resilience.timeout_seconds == 2.5
    assert config.resilience.ratelimit is None


def test_ledger_config_rejects_zero_concurrency(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ETHFETCHER_RPC_URL", "http://node.test:8545")
    monkeypatch.setenv("ETHFETCHER_MAX_CONCURRENCY", "0")

    with pytest.raises(ConfigurationError):
        get_ledger_config()


def test_resolve_config_reads_strict_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ETHFETCHER_STRICT_DECODING", raising=False)
    assert get_resolve_config().strict_decoding is False

    monkeypatch.setenv("ETHFETCHER_STRICT_DECODING", "true")
    assert get_resolve_config().strict_decoding is True
