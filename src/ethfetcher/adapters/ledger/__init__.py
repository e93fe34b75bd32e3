"""Public interface for the JSON-RPC ledger adapter."""

from __future__ import annotations

from .client import JsonRpcLedgerClient, ledger_client_factory
from .schema import ReceiptPayload, RpcResponse, TransactionPayload
from .translator import translate_receipt, translate_transaction

__all__ = [
    "JsonRpcLedgerClient",
    "ReceiptPayload",
    "RpcResponse",
    "TransactionPayload",
    "ledger_client_factory",
    "translate_receipt",
    "translate_transaction",
]
