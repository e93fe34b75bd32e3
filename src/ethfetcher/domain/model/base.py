"""Base building blocks: surrogate identity for stored entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain.

    The id is a storage handle only; entities expose their own external identity.
    """

    id: UUID = field(default_factory=new_id)
