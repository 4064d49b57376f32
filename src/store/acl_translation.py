"""Snapshot ACL translation.

This module maps decoded ACL triples onto kazoo's ACL types.
"""

from __future__ import annotations

from typing import Iterable

from kazoo.security import ACL, ANYONE_ID_UNSAFE, OPEN_ACL_UNSAFE, Id

from core.types import AclEntry

__all__ = ["OPEN_ACL_UNSAFE", "translate_acl", "translate_acls"]


def translate_acl(entry: AclEntry) -> ACL:
    """Translate one snapshot ACL entry.

    The well-known ``world:anyone`` identity maps to kazoo's shared
    ``ANYONE_ID_UNSAFE`` value. Scheme legality is left to the server.

    Args:
        entry: Decoded ACL triple.

    Returns:
        Equivalent kazoo ACL.
    """
    if entry.scheme == ANYONE_ID_UNSAFE.scheme and entry.identity == ANYONE_ID_UNSAFE.id:
        return ACL(entry.perms, ANYONE_ID_UNSAFE)
    return ACL(entry.perms, Id(entry.scheme, entry.identity))


def translate_acls(entries: Iterable[AclEntry]) -> list[ACL]:
    """Translate ACL entries, preserving order."""
    return [translate_acl(entry) for entry in entries]
