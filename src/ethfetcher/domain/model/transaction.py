"""The stored transaction record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .base import Entity
from .enums import TransactionStatus

if TYPE_CHECKING:
    from .primitives import Address, HexData, TransactionHash, Wei


@dataclass(eq=False, kw_only=True)
class TransactionRecord(Entity):
    """Details of one confirmed ledger transaction.

    ``hash`` is the sole external identity. Records are written once from a
    single remote snapshot and never updated afterwards.
    """

    hash: TransactionHash
    status: TransactionStatus = TransactionStatus.UNKNOWN
    block_hash: str | None = None
    block_number: int = 0
    from_address: Address
    to_address: Address | None = None
    # set only when the transaction created a contract
    contract_address: Address | None = None
    logs_count: int = 0
    input: HexData = "0x"
    value: Wei = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionRecord):
            return NotImplemented
        return self.hash == other.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    @property
    def is_contract_creation(self) -> bool:
        return self.to_address is None
