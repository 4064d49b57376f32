"""Ancestor chain tracking for streamed node records.

Snapshots list nodes in the order the backup visited them, so a node's
ancestors normally precede it. The tracker keeps only the chain of records
leading to the current one, which bounds its memory by tree depth.
"""

from __future__ import annotations

from core.types import NodeRecord
from restore.node_paths import ancestor_paths, is_descendant


class PathStackTracker:
    """Bounded stack of the records on the current node's lineage."""

    def __init__(self) -> None:
        self._chain: list[NodeRecord] = []

    @property
    def chain(self) -> tuple[NodeRecord, ...]:
        """Current ancestor chain, outermost first, ending at the last record."""
        return tuple(self._chain)

    @property
    def depth(self) -> int:
        return len(self._chain)

    def push(self, record: NodeRecord) -> tuple[str, ...]:
        """Advance the chain to ``record``.

        Tail entries that are not ancestors of the record are popped before
        the record is pushed. The first record of a stream becomes the chain
        root whatever its depth.

        Args:
            record: Next record in stream order.

        Returns:
            Ancestor paths of the record, top-down, that no chain entry
            accounts for and therefore have to be synthesized.
        """
        while self._chain and not is_descendant(record.path, self._chain[-1].path):
            self._chain.pop()
        seen_paths = {entry.path for entry in self._chain}
        implied = tuple(path for path in ancestor_paths(record.path) if path not in seen_paths)
        self._chain.append(record)
        return implied
