"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ethfetcher.adapters.sqlalchemy.mappings import transaction_owner_table, transaction_table
from ethfetcher.domain.errors import ConflictError, PersistenceError
from ethfetcher.domain.model import TransactionOwnership, TransactionRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from ethfetcher.domain.model import PrincipalId

log = getLogger(__name__)

# dialects supporting INSERT ... ON CONFLICT DO NOTHING
_CONFLICT_IGNORING_INSERTS: dict[str, Callable[[Table], Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlAlchemyTransactionRepository:
    """Write-once store for transaction records.

    Records handed out are detached from the session: they are snapshots and
    survive the rollbacks the caller issues after a failed insert.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_hashes(self, hashes: Collection[str]) -> list[TransactionRecord]:
        if not hashes:
            return []
        stmt = select(TransactionRecord).where(transaction_table.c.hash.in_(list(hashes)))
        return self._detached(stmt)

    def insert_if_absent(self, record: TransactionRecord) -> TransactionRecord:
        values = _record_values(record)
        conflict_ignoring_insert = _CONFLICT_IGNORING_INSERTS.get(self._dialect_name())
        try:
            if conflict_ignoring_insert is not None:
                stmt = conflict_ignoring_insert(transaction_table).values(**values)
                result = self.session.execute(stmt.on_conflict_do_nothing(index_elements=["hash"]))
                if result.rowcount == 0:
                    raise ConflictError(record.hash)
            else:
                self.session.execute(insert(transaction_table).values(**values))
        except IntegrityError as exc:
            self.session.rollback()
            if self._exists(record.hash):
                raise ConflictError(record.hash) from exc
            raise PersistenceError(
                f"Integrity error storing {record.hash}: {exc.orig}",
                transaction_hash=record.hash,
            ) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to store {record.hash}: {exc}",
                transaction_hash=record.hash,
            ) from exc
        return record

    def associate_owner(self, transaction_hash: str, principal: PrincipalId) -> None:
        edge = TransactionOwnership(transaction_hash=transaction_hash, principal_id=principal)
        values = {
            "transaction_hash": edge.transaction_hash,
            "principal_id": edge.principal_id,
            "created_at": edge.created_at,
        }
        conflict_ignoring_insert = _CONFLICT_IGNORING_INSERTS.get(self._dialect_name())
        try:
            if conflict_ignoring_insert is not None:
                stmt = conflict_ignoring_insert(transaction_owner_table).values(**values)
                self.session.execute(
                    stmt.on_conflict_do_nothing(index_elements=["transaction_hash", "principal_id"])
                )
            elif not self._is_owned(transaction_hash, principal):
                self.session.execute(insert(transaction_owner_table).values(**values))
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to link {transaction_hash} to principal {principal}: {exc}",
                transaction_hash=transaction_hash,
            ) from exc

    def list_all(self) -> list[TransactionRecord]:
        stmt = select(TransactionRecord).order_by(transaction_table.c.hash)
        return self._detached(stmt)

    def list_owned(self, principal: PrincipalId) -> list[TransactionRecord]:
        stmt = (
            select(TransactionRecord)
            .join(
                transaction_owner_table,
                transaction_owner_table.c.transaction_hash == transaction_table.c.hash,
            )
            .where(transaction_owner_table.c.principal_id == principal)
            .order_by(transaction_owner_table.c.created_at, transaction_table.c.hash)
        )
        return self._detached(stmt)

    def _detached(self, stmt: Any) -> list[TransactionRecord]:
        records = list(self.session.execute(stmt).scalars())
        for record in records:
            self.session.expunge(record)
        return records

    def _exists(self, transaction_hash: str) -> bool:
        stmt = select(transaction_table.c.id).where(transaction_table.c.hash == transaction_hash)
        return self.session.execute(stmt).first() is not None

    def _is_owned(self, transaction_hash: str, principal: PrincipalId) -> bool:
        stmt = (
            select(transaction_owner_table.c.transaction_hash)
            .where(transaction_owner_table.c.transaction_hash == transaction_hash)
            .where(transaction_owner_table.c.principal_id == principal)
        )
        return self.session.execute(stmt).first() is not None

    def _dialect_name(self) -> str:
        return self.session.get_bind().dialect.name


def _record_values(record: TransactionRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "hash": record.hash,
        "status": record.status,
        "block_hash": record.block_hash,
        "block_number": record.block_number,
        "from_address": record.from_address,
        "to_address": record.to_address,
        "contract_address": record.contract_address,
        "logs_count": record.logs_count,
        "input": record.input,
        "value": record.value,
    }


if TYPE_CHECKING:
    from ethfetcher.domain.ports.persistence import TransactionRepository

    _repo_check: TransactionRepository = SqlAlchemyTransactionRepository(session=None)  # type: ignore[arg-type]
