"""Shared typed models.

This module defines immutable data models used by the ingest, store,
restore, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from core.constants import ROOT_PATH, STDIN_INPUT_URI


@dataclass(frozen=True)
class AclEntry:
    """Raw ACL triple decoded from a snapshot.

    Attributes:
        scheme: Authentication scheme, e.g. ``world`` or ``digest``.
        identity: Scheme-specific identity, e.g. ``anyone``.
        perms: Permission bitmask.
    """

    scheme: str
    identity: str
    perms: int


@dataclass(frozen=True)
class NodeRecord:
    """One decoded node from a snapshot.

    Attributes:
        path: Absolute slash-delimited node path.
        ephemeral_owner: Owning session id, zero for durable nodes.
        data: Raw payload, ``None`` when the node had no data.
        acls: Ordered ACL entries.
    """

    path: str
    ephemeral_owner: int
    data: bytes | None
    acls: tuple[AclEntry, ...] = ()

    @property
    def is_ephemeral(self) -> bool:
        """Return whether the node was ephemeral at capture time."""
        return self.ephemeral_owner != 0


@dataclass(frozen=True)
class RestoreOptions:
    """Restore command options.

    Attributes:
        input_uri: Local path, ``s3://`` URI, or ``-`` for stdin.
        compressed: Whether the input is gzip-compressed.
        root_path: Only nodes at or under this path are restored.
        overwrite_existing: Replace data and ACLs of nodes that already exist.
        no_acls: Ignore snapshot ACLs and use the open ACL everywhere.
        include_patterns: Regexes a path must match, when any are given.
        exclude_patterns: Regexes that exclude a matching path.
    """

    input_uri: str = STDIN_INPUT_URI
    compressed: bool = False
    root_path: str = ROOT_PATH
    overwrite_existing: bool = False
    no_acls: bool = False
    include_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()


class RestoreOutcome(str, Enum):
    """Result of handling one node record."""

    CREATED = "created"
    OVERWRITTEN = "overwritten"
    CONFLICT_SKIPPED = "conflict_skipped"
    SKIPPED_EPHEMERAL = "skipped_ephemeral"
    SKIPPED_OUTSIDE_ROOT = "skipped_outside_root"
    SKIPPED_EXCLUDED = "skipped_excluded"
    SKIPPED_NOT_INCLUDED = "skipped_not_included"


@dataclass(frozen=True)
class RestoreSummary:
    """Counts for a completed restore run.

    Attributes:
        records_read: Number of node records decoded.
        synthesized_paths: Ancestor nodes created without a snapshot record.
        outcome_counts: Number of records per outcome.
    """

    records_read: int
    synthesized_paths: int
    outcome_counts: Mapping[RestoreOutcome, int] = field(default_factory=dict)

    def count(self, outcome: RestoreOutcome) -> int:
        """Return the number of records with the given outcome."""
        return self.outcome_counts.get(outcome, 0)

    def to_lines(self) -> tuple[str, ...]:
        """Render the summary as ``key=value`` lines."""
        lines = [
            f"records_read={self.records_read}",
            f"synthesized_paths={self.synthesized_paths}",
        ]
        for outcome in RestoreOutcome:
            lines.append(f"{outcome.value}={self.count(outcome)}")
        return tuple(lines)
