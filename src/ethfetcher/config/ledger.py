"""Remote ledger (JSON-RPC node) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, require_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CALLS_PER_SECOND = 25


@dataclass(frozen=True, slots=True)
class LedgerConfig:
    """Endpoint and fan-out limits for the remote ledger client."""

    rpc_url: str
    resilience: ResilienceConfig
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY


def build_ledger_resilience(
    rpc_url: str,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    calls_per_second: int | None = DEFAULT_CALLS_PER_SECOND,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="ledger",
        base_url=rpc_url,
        timeout_seconds=timeout_seconds,
        retry=RetryPolicy(),
        ratelimit=RateLimit(max_calls=calls_per_second, per_seconds=1.0)
        if calls_per_second
        else None,
        default_headers={"Content-Type": "application/json"},
    )


def get_ledger_config() -> LedgerConfig:
    rpc_url = require_env_var("ETHFETCHER_RPC_URL")
    timeout = env_float("ETHFETCHER_RPC_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, minimum=0.1)
    rate = env_int("ETHFETCHER_RPC_RATE_LIMIT", DEFAULT_CALLS_PER_SECOND, minimum=0)
    return LedgerConfig(
        rpc_url=rpc_url,
        resilience=build_ledger_resilience(rpc_url, timeout_seconds=timeout, calls_per_second=rate),
        max_concurrency=env_int(
            "ETHFETCHER_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY, minimum=1
        ),
    )
