"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class TransactionStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    # receipt was not available when the record was fetched
    UNKNOWN = "unknown"
