"""Ports for fetching transactions from the remote ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType


@dataclass(frozen=True, slots=True)
class RawTransaction:
    """Transaction fields as reported by the ledger, absent values kept as ``None``."""

    hash: str
    from_address: str
    block_hash: str | None = None
    block_number: int | None = None
    to_address: str | None = None
    creates: str | None = None
    input: str | None = None
    value: int | None = None


@dataclass(frozen=True, slots=True)
class RawReceipt:
    """Post-execution metadata; ``status`` is ``None`` when the ledger did not report one."""

    transaction_hash: str
    status: bool | None = None
    logs_count: int = 0
    contract_address: str | None = None


@runtime_checkable
class LedgerClient(Protocol):
    """Async lookups against the authoritative ledger.

    Both calls return ``None`` for unknown hashes and raise ``RemoteUnavailable``
    on communication failure.
    """

    async def get_transaction_by_hash(self, transaction_hash: str) -> RawTransaction | None: ...

    async def get_transaction_receipt(self, transaction_hash: str) -> RawReceipt | None: ...


@runtime_checkable
class LedgerSession(LedgerClient, Protocol):
    """A ledger client bound to an open connection."""

    async def __aenter__(self) -> LedgerSession: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


class LedgerClientFactory(Protocol):
    """Build a fresh ledger session for one resolve call."""

    def __call__(self) -> LedgerSession: ...


__all__ = [
    "LedgerClient",
    "LedgerClientFactory",
    "LedgerSession",
    "RawReceipt",
    "RawTransaction",
]
