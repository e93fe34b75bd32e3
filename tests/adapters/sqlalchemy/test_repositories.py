"""Tests for the SQLAlchemy transaction repository."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session  # noqa: TC002

from ethfetcher.adapters.sqlalchemy import repositories as repositories_module
from ethfetcher.adapters.sqlalchemy.repositories import SqlAlchemyTransactionRepository
from ethfetcher.domain.errors import ConflictError, PersistenceError
from ethfetcher.domain.model import TransactionStatus
from tests.helpers.transactions import make_hash, make_record


def test_inserted_record_round_trips(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    record = make_record(
        1,
        status=TransactionStatus.FAILURE,
        block_number=2**70,
        value=2**255 + 1,
        to_address=None,
        contract_address="0x" + "cc" * 20,
        input="0x" + "ff" * 300,
    )

    repository.insert_if_absent(record)
    sqlite_session.commit()
    (loaded,) = repository.find_by_hashes([record.hash])

    assert loaded == record
    assert loaded.id == record.id
    assert loaded.status is TransactionStatus.FAILURE
    assert loaded.block_number == 2**70
    assert loaded.value == 2**255 + 1
    assert loaded.to_address is None
    assert loaded.contract_address == "0x" + "cc" * 20
    assert loaded.input == "0x" + "ff" * 300


def test_find_by_hashes_returns_only_stored(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    repository.insert_if_absent(make_record(1))
    repository.insert_if_absent(make_record(2))
    sqlite_session.commit()

    found = repository.find_by_hashes([make_hash(2), make_hash(3)])

    assert [record.hash for record in found] == [make_hash(2)]
    assert repository.find_by_hashes([]) == []


def test_found_records_survive_a_rollback(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    repository.insert_if_absent(make_record(1, value=5))
    sqlite_session.commit()

    (found,) = repository.find_by_hashes([make_hash(1)])
    sqlite_session.rollback()
    sqlite_session.close()

    assert found.value == 5


def test_second_insert_raises_conflict(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    repository.insert_if_absent(make_record(1))
    sqlite_session.commit()

    with pytest.raises(ConflictError) as excinfo:
        repository.insert_if_absent(make_record(1, value=99))
    sqlite_session.rollback()

    assert excinfo.value.is_duplicate
    assert excinfo.value.transaction_hash == make_hash(1)
    (stored,) = repository.find_by_hashes([make_hash(1)])
    assert stored.value == 1_000


def test_conflict_detected_without_upsert_support(
    sqlite_session: Session,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(repositories_module, "_CONFLICT_IGNORING_INSERTS", {})
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    repository.insert_if_absent(make_record(1))
    sqlite_session.commit()

    with pytest.raises(ConflictError):
        repository.insert_if_absent(make_record(1))

    repository.associate_owner(make_hash(1), "alice")
    repository.associate_owner(make_hash(1), "alice")
    sqlite_session.commit()
    assert [record.hash for record in repository.list_owned("alice")] == [make_hash(1)]


def test_invalid_values_raise_persistence_error(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)

    with pytest.raises(PersistenceError) as excinfo:
        repository.insert_if_absent(make_record(1, value=-1))

    assert not excinfo.value.is_duplicate
    assert not isinstance(excinfo.value, ConflictError)


def test_associate_owner_is_idempotent(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    repository.insert_if_absent(make_record(1))
    repository.insert_if_absent(make_record(2))
    sqlite_session.commit()

    repository.associate_owner(make_hash(1), "alice")
    repository.associate_owner(make_hash(1), "alice")
    repository.associate_owner(make_hash(2), "bob")
    sqlite_session.commit()

    assert [record.hash for record in repository.list_owned("alice")] == [make_hash(1)]
    assert [record.hash for record in repository.list_owned("bob")] == [make_hash(2)]
    assert repository.list_owned("carol") == []


def test_list_all_orders_by_hash(sqlite_session: Session) -> None:
    repository = SqlAlchemyTransactionRepository(sqlite_session)
    for number in (3, 1, 2):
        repository.insert_if_absent(make_record(number))
    sqlite_session.commit()

    assert [record.hash for record in repository.list_all()] == [
        make_hash(1),
        make_hash(2),
        make_hash(3),
    ]
