"""Domain port definitions for adapters."""

from __future__ import annotations

from .ledger import (
    LedgerClient,
    LedgerClientFactory,
    LedgerSession,
    RawReceipt,
    RawTransaction,
)
from .persistence import TransactionRepository
from .unit_of_work import (
    RepositoryCollection,
    TransactionRepositories,
    TransactionUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "LedgerClient",
    "LedgerClientFactory",
    "LedgerSession",
    "RawReceipt",
    "RawTransaction",
    "RepositoryCollection",
    "TransactionRepositories",
    "TransactionRepository",
    "TransactionUnitOfWork",
    "UnitOfWork",
]
