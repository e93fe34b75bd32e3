"""Pydantic models describing Ethereum JSON-RPC payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

JSONRPC_VERSION = "2.0"


def _parse_quantity(value: object) -> object:
    """Decode a JSON-RPC hex quantity (``"0x1b4"``); other values pass through."""

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        return int(stripped, 16)
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class RpcBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RpcErrorPayload(RpcBaseModel):
    code: int
    message: str


class RpcResponse(RpcBaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    result: Any = None
    error: RpcErrorPayload | None = None


class TransactionPayload(RpcBaseModel):
    hash: str
    from_address: str = Field(alias="from")
    to_address: str | None = Field(default=None, alias="to")
    block_hash: str | None = Field(default=None, alias="blockHash")
    block_number: int | None = Field(default=None, alias="blockNumber")
    input: str | None = None
    value: int | None = None
    # only reported by some clients (OpenEthereum, Nethermind)
    creates: str | None = None

    _parse_quantities = field_validator("block_number", "value", mode="before")(_parse_quantity)
    _normalize_addresses = field_validator("to_address", "creates", mode="before")(_blank_to_none)


class LogPayload(RpcBaseModel):
    address: str | None = None
    log_index: int | None = Field(default=None, alias="logIndex")

    _parse_index = field_validator("log_index", mode="before")(_parse_quantity)


class ReceiptPayload(RpcBaseModel):
    transaction_hash: str = Field(alias="transactionHash")
    # absent on pre-Byzantium receipts, which carry a state root instead
    status: int | None = None
    logs: list[LogPayload] = Field(default_factory=list)
    contract_address: str | None = Field(default=None, alias="contractAddress")

    _parse_status = field_validator("status", mode="before")(_parse_quantity)
    _normalize_contract = field_validator("contract_address", mode="before")(_blank_to_none)
