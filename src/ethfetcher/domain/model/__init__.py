"""Domain model for stored ledger transactions."""

from __future__ import annotations

from .base import Entity, new_id
from .enums import TransactionStatus
from .ownership import TransactionOwnership
from .primitives import Address, HexData, PrincipalId, TransactionHash, Wei
from .transaction import TransactionRecord

__all__ = [
    "Address",
    "Entity",
    "HexData",
    "PrincipalId",
    "TransactionHash",
    "TransactionOwnership",
    "TransactionRecord",
    "TransactionStatus",
    "Wei",
    "new_id",
]
