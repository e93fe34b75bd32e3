"""SQLAlchemy mapping metadata for the ethfetcher domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from ethfetcher.domain.model import TransactionRecord, TransactionStatus

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

# 2**256 - 1 has 78 decimal digits
UINT256_DIGITS: Final[int] = 78
UQ_TRANSACTION_HASH: Final[str] = "uq_ledger_transaction_hash"


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class UnsignedBigInteger(TypeDecorator[int]):
    """Non-negative integer of up to 256 bits stored as a decimal string.

    Native integer columns stop at 64 bits and SQLite NUMERIC silently turns
    wider values into floats.
    """

    impl = String(UINT256_DIGITS)
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        if value < 0:
            raise ValueError(f"Expected a non-negative integer, got {value}")
        return str(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> int | None:
        _ = dialect
        if value is None:
            return None
        return int(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

transaction_table = Table(
    "ledger_transaction",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("hash", String(66), nullable=False),
    Column(
        "status",
        Enum(
            TransactionStatus,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    ),
    Column("block_hash", String(66), nullable=True),
    Column("block_number", UnsignedBigInteger, nullable=False, default=0),
    Column("from_address", String(42), nullable=False),
    Column("to_address", String(42), nullable=True),
    Column("contract_address", String(42), nullable=True),
    Column("logs_count", Integer, nullable=False, default=0),
    Column("input", Text, nullable=False, default="0x"),
    Column("value", UnsignedBigInteger, nullable=False, default=0),
    UniqueConstraint("hash", name=UQ_TRANSACTION_HASH),
)

transaction_owner_table = Table(
    "transaction_owner",
    mapper_registry.metadata,
    Column(
        "transaction_hash",
        String(66),
        ForeignKey("ledger_transaction.hash", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("principal_id", String(255), nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    PrimaryKeyConstraint("transaction_hash", "principal_id"),
    Index("ix_transaction_owner_principal_id", "principal_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map domain classes onto the tables; safe to call repeatedly."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(TransactionRecord, transaction_table)
    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
