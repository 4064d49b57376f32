"""Ancestor path materialization.

This module makes sure every ancestor of a node exists before the node
itself is created, creating missing segments top-down.
"""

from __future__ import annotations

from core.constants import ROOT_PATH
from core.errors import NodeExistsStoreError
from core.logging_config import get_logger
from restore.node_paths import parent_path
from store.acl_translation import OPEN_ACL_UNSAFE
from store.node_store import NodeStore

_LOGGER = get_logger(__name__)


class PathMaterializer:
    """Creates missing paths and remembers what this run has handled."""

    def __init__(self, store: NodeStore) -> None:
        self._store = store
        self._created_paths: set[str] = set()
        self._created_count = 0

    @property
    def created_count(self) -> int:
        """Number of nodes this materializer created itself."""
        return self._created_count

    def was_created(self, path: str) -> bool:
        """Return whether ``path`` is known to exist in this run."""
        return path == ROOT_PATH or path in self._created_paths

    def mark_created(self, path: str) -> None:
        self._created_paths.add(path)

    def ensure_path(self, path: str) -> int:
        """Guarantee that ``path`` exists in the store.

        Missing nodes are created with no data and the open ACL. Paths
        already handled in this run cost no store calls.

        Args:
            path: Absolute node path.

        Returns:
            Number of nodes created by this call.

        Raises:
            StoreUnavailableError: If a store call fails.
        """
        missing_paths: list[str] = []
        current = path
        while not self.was_created(current):
            if self._store.exists(current):
                self.mark_created(current)
                break
            missing_paths.append(current)
            current = parent_path(current)
        created = 0
        for missing_path in reversed(missing_paths):
            if self._create(missing_path):
                created += 1
            self.mark_created(missing_path)
        self._created_count += created
        return created

    def _create(self, path: str) -> bool:
        _LOGGER.info("creating_path", path=path)
        try:
            self._store.create(path, None, OPEN_ACL_UNSAFE)
        except NodeExistsStoreError:
            # Another writer created it first; the path exists either way.
            _LOGGER.debug("ancestor_create_race_tolerated", path=path)
            return False
        return True
