from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import rlp

from ethfetcher import app
from ethfetcher.domain.errors import MalformedHash, UnexpectedShape
from ethfetcher.domain.reconcile import ResolveResult
from tests.helpers.transactions import (
    FakeLedger,
    FakeTransactionRepository,
    FakeUnitOfWork,
    make_hash,
    make_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ethfetcher.adapters.sqlalchemy.unit_of_work import SqlAlchemyTransactionUnitOfWork


class RecordingReconciler:
    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str | None]] = []

    def resolve(self, hashes: Sequence[str], principal: str | None = None) -> ResolveResult:
        self.calls.append((list(hashes), principal))
        return ResolveResult(records=[make_record(1)], fetched=1)


@pytest.fixture
def reconciler() -> RecordingReconciler:
    return RecordingReconciler()


def test_nothing_to_resolve(reconciler: RecordingReconciler) -> None:
    assert app.fetch_transactions(reconciler=reconciler) == ResolveResult()  # type: ignore[arg-type]
    assert app.fetch_transactions(hashes=[], reconciler=reconciler) == ResolveResult()  # type: ignore[arg-type]
    assert app.fetch_transactions(rlphex="  ", reconciler=reconciler) == ResolveResult()  # type: ignore[arg-type]
    assert reconciler.calls == []


def test_hashes_and_rlp_are_mutually_exclusive(reconciler: RecordingReconciler) -> None:
    with pytest.raises(ValueError, match="either"):
        app.fetch_transactions(hashes=[make_hash(1)], rlphex="c0", reconciler=reconciler)  # type: ignore[arg-type]


def test_hashes_are_canonicalized(reconciler: RecordingReconciler) -> None:
    raw = make_hash(255).upper().replace("0X", "0x")

    app.fetch_transactions(hashes=[raw], principal="alice", reconciler=reconciler)  # type: ignore[arg-type]

    assert reconciler.calls == [([make_hash(255)], "alice")]


def test_malformed_hash_is_rejected(reconciler: RecordingReconciler) -> None:
    with pytest.raises(MalformedHash):
        app.fetch_transactions(hashes=["0x1234"], reconciler=reconciler)  # type: ignore[arg-type]


def test_rlp_payload_is_decoded(reconciler: RecordingReconciler) -> None:
    payload = rlp.encode([bytes.fromhex(make_hash(1)[2:]), bytes.fromhex(make_hash(2)[2:])])

    app.fetch_transactions(rlphex=payload.hex(), reconciler=reconciler)  # type: ignore[arg-type]

    assert reconciler.calls == [([make_hash(1), make_hash(2)], None)]


def test_strict_decoding_follows_environment(
    monkeypatch: pytest.MonkeyPatch,
    reconciler: RecordingReconciler,
) -> None:
    nested = rlp.encode([bytes.fromhex(make_hash(1)[2:]), [b"\x01"]]).hex()

    monkeypatch.setenv("ETHFETCHER_STRICT_DECODING", "true")
    with pytest.raises(UnexpectedShape):
        app.fetch_transactions(rlphex=nested, reconciler=reconciler)  # type: ignore[arg-type]

    app.fetch_transactions(rlphex=nested, reconciler=reconciler, strict=False)  # type: ignore[arg-type]
    assert reconciler.calls == [([make_hash(1)], None)]


def test_build_reconciler_reads_ledger_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ETHFETCHER_RPC_URL", "http://node.test:8545")
    monkeypatch.setenv("ETHFETCHER_MAX_CONCURRENCY", "3")
    uow = FakeUnitOfWork(FakeTransactionRepository())

    reconciler = app.build_reconciler(unit_of_work_factory=uow.factory)

    assert reconciler.max_concurrency == 3


def test_fetch_and_list_against_sqlite(
    sqlite_unit_of_work: Callable[[], SqlAlchemyTransactionUnitOfWork],
) -> None:
    hashes = [make_hash(2), make_hash(1)]
    ledger = FakeLedger.with_hashes(hashes)
    reconciler = app.build_reconciler(
        ledger_factory=ledger.factory,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    first = app.fetch_transactions(hashes=hashes, principal="alice", reconciler=reconciler)
    second = app.fetch_transactions(hashes=hashes, reconciler=reconciler)

    assert first.hashes == hashes
    assert first.fetched == 2
    assert second.cached == 2
    assert len(ledger.lookups()) == 2
    listed = app.list_transactions(unit_of_work_factory=sqlite_unit_of_work)
    owned = app.list_transactions(principal="alice", unit_of_work_factory=sqlite_unit_of_work)
    assert [record.hash for record in listed] == sorted(hashes)
    assert {record.hash for record in owned} == set(hashes)
    assert app.list_transactions(principal="bob", unit_of_work_factory=sqlite_unit_of_work) == []


def test_stored_hashes_from_rlp_need_no_remote_calls() -> None:
    stored = [make_record(0xAAAA), make_record(0xBBBB)]
    ledger = FakeLedger()
    uow = FakeUnitOfWork(FakeTransactionRepository(stored))
    reconciler = app.build_reconciler(ledger_factory=ledger.factory, unit_of_work_factory=uow.factory)
    payload = rlp.encode([bytes.fromhex(record.hash[2:]) for record in stored]).hex()

    result = app.fetch_transactions(rlphex=payload, reconciler=reconciler)

    assert result.records == stored
    assert ledger.calls == []
