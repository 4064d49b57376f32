"""Coordination store contract consumed by the restore engine.

The restore core only needs blocking existence checks, persistent node
creation, and unconditional data/ACL updates. Implementations raise
``NodeExistsStoreError`` from ``create`` when the node is already present
and ``StoreUnavailableError`` for any other store failure.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from kazoo.security import ACL

from core.constants import ANY_VERSION


class NodeStore(Protocol):
    """Blocking node operations on one store session."""

    def exists(self, path: str) -> bool: ...

    def create(self, path: str, data: bytes | None, acls: Sequence[ACL]) -> None: ...

    def set_data(self, path: str, data: bytes | None, version: int = ANY_VERSION) -> None: ...

    def set_acls(self, path: str, acls: Sequence[ACL], version: int = ANY_VERSION) -> None: ...

    def close(self) -> None: ...
