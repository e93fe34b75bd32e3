"""Cache-aside resolution of transaction hashes.

Flow for one ``resolve`` call:

1) deduplicate the requested hashes
2) look them up in the store with one batched query, releasing the store again
3) fetch the misses from the ledger concurrently (transaction, then receipt)
4) normalize and store each fetched record in a fresh unit of work, committing after each insert
5) link every resolved record to the requesting principal, if any

The store's unique constraint on ``hash`` is the only guard against concurrent
callers storing the same transaction; losing that race is not an error.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import PersistenceError, RemoteUnavailable
from .normalize import normalize_transaction

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .model import PrincipalId, TransactionRecord
    from .ports.ledger import LedgerClient, LedgerClientFactory
    from .ports.unit_of_work import TransactionUnitOfWork

log = getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


@dataclass(slots=True)
class ResolveResult:
    """Outcome of a resolve call.

    ``failures`` holds records that were fetched but could not be stored; they
    are not part of ``records``. A result with failures is a partial success.
    """

    records: list[TransactionRecord] = field(default_factory=list)
    failures: dict[str, PersistenceError] = field(default_factory=dict)
    cached: int = 0
    fetched: int = 0

    @property
    def partial(self) -> bool:
        return bool(self.failures)

    @property
    def hashes(self) -> list[str]:
        return [record.hash for record in self.records]


@dataclass(slots=True)
class TransactionReconciler:
    """Resolve transaction hashes against the local store and the remote ledger."""

    ledger_factory: LedgerClientFactory
    unit_of_work_factory: Callable[[], TransactionUnitOfWork]
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

    def resolve(
        self,
        hashes: Sequence[str],
        principal: PrincipalId | None = None,
    ) -> ResolveResult:
        """Return records for every known hash in ``hashes``.

        Hashes unknown to the ledger are left out of the result. Raises
        ``RemoteUnavailable`` if any ledger lookup fails; nothing fetched by
        this call is stored in that case.

        Remote lookups run on their own event loop via ``asyncio.run``, so this
        must not be called from a running loop. Async callers should use
        ``await asyncio.to_thread(reconciler.resolve, hashes)``.
        """

        requested = list(dict.fromkeys(hashes))
        if not requested:
            return ResolveResult()

        # the store is released before the ledger fan-out starts
        with self.unit_of_work_factory() as uow:
            log.debug("Looking up %s transactions in the store", len(requested))
            found = uow.repositories.transactions.find_by_hashes(requested)
        found_hashes = {record.hash for record in found}
        misses = [value for value in requested if value not in found_hashes]
        log.debug("Found %s stored transactions, %s to fetch", len(found), len(misses))

        fetched: list[TransactionRecord] = []
        if misses:
            fetched = asyncio.run(self.fetch_missing(misses))
            log.debug("Ledger returned %s of %s transactions", len(fetched), len(misses))

        stored: list[TransactionRecord] = []
        failures: dict[str, PersistenceError] = {}
        if fetched or (principal is not None and found):
            with self.unit_of_work_factory() as uow:
                stored, failures = self._store(uow, fetched)
                if principal is not None and (found or stored):
                    self._associate(uow, [*found, *stored], principal)
        resolved = [*found, *stored]

        return ResolveResult(
            records=_in_request_order(resolved, requested),
            failures=failures,
            cached=len(found),
            fetched=len(fetched),
        )

    async def fetch_missing(self, hashes: Sequence[str]) -> list[TransactionRecord]:
        """Fetch and normalize ``hashes`` from the ledger, at most ``max_concurrency`` at a time.

        The first ``RemoteUnavailable`` cancels the remaining lookups and propagates.
        """

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with self.ledger_factory() as ledger:
            tasks = [
                asyncio.create_task(self._fetch_one(ledger, value, semaphore)) for value in hashes
            ]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        return [record for record in results if record is not None]

    async def _fetch_one(
        self,
        ledger: LedgerClient,
        transaction_hash: str,
        semaphore: asyncio.Semaphore,
    ) -> TransactionRecord | None:
        async with semaphore:
            try:
                transaction = await ledger.get_transaction_by_hash(transaction_hash)
                if transaction is None:
                    log.debug("Transaction %s is unknown to the ledger", transaction_hash)
                    return None
                receipt = await ledger.get_transaction_receipt(transaction.hash)
            except RemoteUnavailable as exc:
                if exc.transaction_hash is None:
                    exc.transaction_hash = transaction_hash
                log.error("Ledger lookup failed for %s: %s", transaction_hash, exc)  # noqa: TRY400
                raise
        if receipt is None:
            log.debug("No receipt for %s, status stays unknown", transaction_hash)
        return normalize_transaction(transaction, receipt)

    def _store(
        self,
        uow: TransactionUnitOfWork,
        records: Sequence[TransactionRecord],
    ) -> tuple[list[TransactionRecord], dict[str, PersistenceError]]:
        repository = uow.repositories.transactions
        stored: list[TransactionRecord] = []
        failures: dict[str, PersistenceError] = {}
        conflicts = 0
        for record in records:
            try:
                repository.insert_if_absent(record)
                uow.commit()
            except PersistenceError as exc:
                uow.rollback()
                if not exc.is_duplicate:
                    log.warning("Failed to store transaction %s: %s", record.hash, exc)
                    failures[record.hash] = exc
                    continue
                # stored concurrently by another request; keep our copy
                conflicts += 1
            stored.append(record)

        log.debug(
            "Stored %s transactions (%s already present, %s failed)",
            len(stored) - conflicts,
            conflicts,
            len(failures),
        )
        return stored, failures

    def _associate(
        self,
        uow: TransactionUnitOfWork,
        records: Sequence[TransactionRecord],
        principal: PrincipalId,
    ) -> None:
        repository = uow.repositories.transactions
        for record in records:
            repository.associate_owner(record.hash, principal)
        uow.commit()
        log.debug("Linked %s transactions to principal %s", len(records), principal)


def _in_request_order(
    records: Sequence[TransactionRecord],
    requested: Sequence[str],
) -> list[TransactionRecord]:
    position = {value.lower(): index for index, value in enumerate(requested)}
    fallback = len(position)
    return sorted(records, key=lambda record: position.get(record.hash.lower(), fallback))
