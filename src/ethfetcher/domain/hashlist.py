"""Decode RLP-encoded transaction hash lists.

The accepted payload is the hex form of one RLP list of hashes::

    rlp([hash_1, hash_2, ...])

The decoded top-level items form the outer list, so the encoded list itself is
its first element. Byte-string members of that list become ``0x``-prefixed hex
strings in encoded order; duplicates are kept. Bytes after the first
top-level item are rejected.
"""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING

import rlp
from eth_utils import decode_hex, encode_hex
from rlp.exceptions import RLPException

from .errors import MalformedEncoding, MalformedHash, UnexpectedShape

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)

_HEX_PAYLOAD = re.compile(r"^(?:0[xX])?(?:[0-9a-fA-F]{2})+$")
_TRANSACTION_HASH = re.compile(r"^0x[0-9a-f]{64}$")


def decode_hash_list(rlphex: str, *, strict: bool = False) -> list[str]:
    """Return the transaction hashes carried by ``rlphex``.

    Raises ``MalformedEncoding`` for bad hex or bad RLP and ``UnexpectedShape``
    when the encoded item is a byte string rather than a list. With
    ``strict=False`` non-byte-string members of the hash list are skipped;
    with ``strict=True`` they raise ``UnexpectedShape``.
    """

    payload = _hex_to_bytes(rlphex)
    try:
        decoded = rlp.decode(payload)
    except RLPException as exc:
        raise MalformedEncoding(f"Invalid RLP payload: {exc}") from exc

    if not isinstance(decoded, list):
        raise UnexpectedShape("Expected an RLP list of hashes, got a byte string")

    hashes: list[str] = []
    for position, element in enumerate(decoded):
        if isinstance(element, bytes):
            hashes.append(encode_hex(element))
            continue
        if strict:
            raise UnexpectedShape(f"Element {position} of the hash list is a nested list")
        log.debug("Skipping nested list at position %s of the hash list", position)
    return hashes


def _hex_to_bytes(value: str) -> bytes:
    candidate = value.strip()
    if not _HEX_PAYLOAD.match(candidate):
        raise MalformedEncoding(
            "Encoded hash list must be a non-empty hex string with an even number of digits"
        )
    return decode_hex(candidate)


def canonical_hash(value: str) -> str:
    """Lower-case ``value`` and check it is a 0x-prefixed 32-byte hex string."""

    candidate = value.strip().lower()
    if not candidate.startswith("0x"):
        candidate = f"0x{candidate}"
    if not _TRANSACTION_HASH.match(candidate):
        raise MalformedHash(f"Not a transaction hash: {value!r}")
    return candidate


def canonical_hashes(values: Iterable[str]) -> list[str]:
    return [canonical_hash(value) for value in values]
