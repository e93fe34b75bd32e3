"""Principal-to-transaction association edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .primitives import PrincipalId, TransactionHash


@dataclass(frozen=True, slots=True)
class TransactionOwnership:
    """Edge recording that a principal requested a transaction.

    Stored in its own join table; neither side holds a reference to the other.
    """

    transaction_hash: TransactionHash
    principal_id: PrincipalId
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC), compare=False)
