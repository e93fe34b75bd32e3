"""Domain primitives: scalar aliases.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

type TransactionHash = str
type Address = str
type HexData = str
type PrincipalId = str
type Wei = int
