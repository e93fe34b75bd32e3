"""Error taxonomy shared by the decoder, reconciler and adapters."""

from __future__ import annotations

from enum import StrEnum


class EthFetcherError(Exception):
    """Base class for every error raised by ethfetcher."""


class MalformedEncoding(EthFetcherError, ValueError):
    """Raised when an encoded hash list is not valid hex or not valid RLP."""


class MalformedHash(MalformedEncoding):
    """Raised when a transaction hash is not a 0x-prefixed 32-byte hex string."""


class UnexpectedShape(EthFetcherError, ValueError):
    """Raised when a decoded hash list is not a list, or strict decoding meets a nested list."""


class RemoteUnavailable(EthFetcherError):
    """Raised when the remote ledger cannot be reached or answers garbage.

    Transient by nature; callers may retry the whole request.
    """

    retryable = True

    def __init__(self, message: str, *, transaction_hash: str | None = None) -> None:
        super().__init__(message)
        self.transaction_hash = transaction_hash


class PersistenceFailure(StrEnum):
    DUPLICATE = "duplicate"
    OTHER = "other"


class PersistenceError(EthFetcherError):
    """Raised by the record store; ``kind`` tells a benign duplicate from a real failure."""

    def __init__(
        self,
        message: str,
        *,
        transaction_hash: str,
        kind: PersistenceFailure = PersistenceFailure.OTHER,
    ) -> None:
        super().__init__(message)
        self.transaction_hash = transaction_hash
        self.kind = kind

    @property
    def is_duplicate(self) -> bool:
        return self.kind is PersistenceFailure.DUPLICATE


class ConflictError(PersistenceError):
    """Insert rejected because a record with the same hash already exists."""

    def __init__(self, transaction_hash: str) -> None:
        super().__init__(
            f"Transaction {transaction_hash} is already stored",
            transaction_hash=transaction_hash,
            kind=PersistenceFailure.DUPLICATE,
        )
