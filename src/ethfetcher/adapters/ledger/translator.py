"""Translate JSON-RPC payloads into ledger port values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ethfetcher.domain.ports.ledger import RawReceipt, RawTransaction

if TYPE_CHECKING:
    from .schema import ReceiptPayload, TransactionPayload


def translate_transaction(payload: TransactionPayload) -> RawTransaction:
    return RawTransaction(
        hash=payload.hash,
        from_address=payload.from_address,
        block_hash=payload.block_hash,
        block_number=payload.block_number,
        to_address=payload.to_address,
        creates=payload.creates,
        input=payload.input,
        value=payload.value,
    )


def translate_receipt(payload: ReceiptPayload) -> RawReceipt:
    status: bool | None = None
    if payload.status is not None:
        status = payload.status == 1
    return RawReceipt(
        transaction_hash=payload.transaction_hash,
        status=status,
        logs_count=len(payload.logs),
        contract_address=payload.contract_address,
    )
