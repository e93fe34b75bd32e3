"""Ports for persisting transaction records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection

    from ethfetcher.domain.model import PrincipalId, TransactionRecord


@runtime_checkable
class TransactionRepository(Protocol):
    """Persistence contract for transaction records and their owners."""

    def find_by_hashes(self, hashes: Collection[str]) -> list[TransactionRecord]: ...

    def insert_if_absent(self, record: TransactionRecord) -> TransactionRecord:
        """Store ``record``.

        Raises ``ConflictError`` when the hash is already stored and
        ``PersistenceError`` for any other failure.
        """
        ...

    def associate_owner(self, transaction_hash: str, principal: PrincipalId) -> None:
        """Link a stored record to a principal; repeating the link is a no-op."""
        ...

    def list_all(self) -> list[TransactionRecord]: ...

    def list_owned(self, principal: PrincipalId) -> list[TransactionRecord]: ...
