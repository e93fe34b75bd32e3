"""Shape raw ledger payloads into stored transaction records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .model import TransactionRecord, TransactionStatus

if TYPE_CHECKING:
    from .ports.ledger import RawReceipt, RawTransaction


def receipt_status(receipt: RawReceipt | None) -> TransactionStatus:
    if receipt is None or receipt.status is None:
        return TransactionStatus.UNKNOWN
    return TransactionStatus.SUCCESS if receipt.status else TransactionStatus.FAILURE


def normalize_transaction(
    transaction: RawTransaction,
    receipt: RawReceipt | None,
) -> TransactionRecord:
    """Build a ``TransactionRecord`` from one remote snapshot.

    Absent optional fields map to their defaults: zero block number, zero
    value, empty input, no logs and unknown status without a receipt.
    """

    contract_address = transaction.creates
    if receipt is not None and receipt.contract_address:
        contract_address = receipt.contract_address

    return TransactionRecord(
        hash=transaction.hash,
        status=receipt_status(receipt),
        block_hash=transaction.block_hash,
        block_number=transaction.block_number or 0,
        from_address=transaction.from_address,
        to_address=transaction.to_address,
        contract_address=contract_address,
        logs_count=receipt.logs_count if receipt is not None else 0,
        input=transaction.input or "0x",
        value=transaction.value or 0,
    )
