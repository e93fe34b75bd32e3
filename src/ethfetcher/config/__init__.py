"""Application configuration helpers."""

from __future__ import annotations

from .env import env_bool, env_float, env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .ledger import LedgerConfig, build_ledger_resilience, get_ledger_config
from .logging import configure_logging
from .resolve import ResolveConfig, get_resolve_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "LedgerConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResolveConfig",
    "RetryPolicy",
    "StorageConfig",
    "build_ledger_resilience",
    "configure_logging",
    "env_bool",
    "env_float",
    "env_int",
    "get_database_config",
    "get_ledger_config",
    "get_resolve_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
