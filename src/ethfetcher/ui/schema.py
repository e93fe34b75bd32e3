"""JSON output models for the command line interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ethfetcher.domain.errors import PersistenceError
    from ethfetcher.domain.model import TransactionRecord


class TransactionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    hash: str
    status: str
    block_hash: str | None = Field(default=None, alias="blockHash")
    block_number: int = Field(default=0, alias="blockNumber")
    from_address: str = Field(alias="from")
    to_address: str | None = Field(default=None, alias="to")
    contract_address: str | None = Field(default=None, alias="contractAddress")
    contract_creation: bool = Field(default=False, alias="contractCreation")
    logs_count: int = Field(default=0, alias="logsCount")
    input: str = "0x"
    value: int = 0

    @classmethod
    def from_record(cls, record: TransactionRecord) -> TransactionPayload:
        return cls(
            hash=record.hash,
            status=str(record.status),
            block_hash=record.block_hash,
            block_number=record.block_number,
            from_address=record.from_address,
            to_address=record.to_address,
            contract_address=record.contract_address,
            contract_creation=record.is_contract_creation,
            logs_count=record.logs_count,
            input=record.input,
            value=record.value,
        )


class FailurePayload(BaseModel):
    hash: str
    reason: str


class TransactionListPayload(BaseModel):
    transactions: list[TransactionPayload]
    failures: list[FailurePayload] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        records: Iterable[TransactionRecord],
        failures: Mapping[str, PersistenceError] | None = None,
    ) -> TransactionListPayload:
        return cls(
            transactions=[TransactionPayload.from_record(record) for record in records],
            failures=[
                FailurePayload(hash=transaction_hash, reason=str(error))
                for transaction_hash, error in (failures or {}).items()
            ],
        )
