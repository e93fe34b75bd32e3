"""Defaults for hash-list decoding and resolution."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool


@dataclass(frozen=True, slots=True)
class ResolveConfig:
    strict_decoding: bool = False


def get_resolve_config() -> ResolveConfig:
    return ResolveConfig(strict_decoding=env_bool("ETHFETCHER_STRICT_DECODING", default=False))
