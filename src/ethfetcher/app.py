"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from ethfetcher.adapters.ledger import ledger_client_factory
from ethfetcher.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyTransactionUnitOfWork,
    is_started,
    startup,
)
from ethfetcher.config.ledger import get_ledger_config
from ethfetcher.config.resolve import get_resolve_config
from ethfetcher.domain.hashlist import canonical_hashes, decode_hash_list
from ethfetcher.domain.ports.unit_of_work import TransactionUnitOfWork
from ethfetcher.domain.reconcile import DEFAULT_MAX_CONCURRENCY, ResolveResult, TransactionReconciler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ethfetcher.config.ledger import LedgerConfig
    from ethfetcher.domain.model import PrincipalId, TransactionRecord
    from ethfetcher.domain.ports.ledger import LedgerClientFactory

UnitOfWorkFactory = Callable[[], TransactionUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyTransactionUnitOfWork


def build_reconciler(
    *,
    ledger_config: LedgerConfig | None = None,
    ledger_factory: LedgerClientFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    max_concurrency: int | None = None,
) -> TransactionReconciler:
    """Wire the JSON-RPC ledger client and the SQLAlchemy store into a reconciler.

    Anything passed in replaces the configured default; the ledger config is
    only read from the environment when no ``ledger_factory`` is given.
    """

    if ledger_factory is None:
        config = ledger_config or get_ledger_config()
        ledger_factory = ledger_client_factory(config)
        if max_concurrency is None:
            max_concurrency = config.max_concurrency

    return TransactionReconciler(
        ledger_factory=ledger_factory,
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        max_concurrency=DEFAULT_MAX_CONCURRENCY if max_concurrency is None else max_concurrency,
    )


def fetch_transactions(
    *,
    hashes: Sequence[str] | None = None,
    rlphex: str | None = None,
    principal: PrincipalId | None = None,
    reconciler: TransactionReconciler | None = None,
    strict: bool | None = None,
) -> ResolveResult:
    """Resolve an explicit hash list or an RLP-encoded one.

    Pass at most one of ``hashes`` and ``rlphex``; nothing to resolve yields
    an empty result without touching the store or the ledger.
    """

    if hashes is not None and rlphex is not None:
        raise ValueError("Pass either hashes or rlphex, not both")

    if rlphex is not None and rlphex.strip():
        strict_decoding = get_resolve_config().strict_decoding if strict is None else strict
        hashes = decode_hash_list(rlphex, strict=strict_decoding)

    requested = canonical_hashes(hashes or ())
    if not requested:
        log.info("No transaction hashes to resolve")
        return ResolveResult()

    effective_reconciler = reconciler or build_reconciler()
    log.info("Resolving %s transaction hashes (principal=%s)", len(requested), principal)

    result = effective_reconciler.resolve(requested, principal=principal)

    log.info(
        f"Finished resolve: returned={len(result.records)}, cached={result.cached}, "
        f"fetched={result.fetched}, failed={len(result.failures)}"
    )
    return result


def list_transactions(
    *,
    principal: PrincipalId | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[TransactionRecord]:
    """Return every stored record, or only those linked to ``principal``."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        repository = uow.repositories.transactions
        if principal is None:
            return repository.list_all()
        return repository.list_owned(principal)
