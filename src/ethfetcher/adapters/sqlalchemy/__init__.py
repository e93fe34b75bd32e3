"""SQLAlchemy adapter package for ethfetcher."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    mapper_registry,
    start_mappers,
    transaction_owner_table,
    transaction_table,
)
from .repositories import SqlAlchemyTransactionRepository
from .unit_of_work import (
    SqlAlchemyTransactionUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyTransactionUnitOfWork",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
    "transaction_owner_table",
    "transaction_table",
]
