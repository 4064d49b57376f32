"""Python SDK for restore operations.

This module exposes a high-level client that runs restores against the
configured ZooKeeper ensemble.
"""

from __future__ import annotations

from dataclasses import replace

from core.config import RestoreConfig
from core.run_spec_execution import execute_run_spec_file
from core.types import RestoreOptions, RestoreSummary
from restore.pipeline import StoreFactory, restore_snapshot
from store.zookeeper_store import open_zookeeper_store


class RestoreClient:
    """Primary SDK entry point for restore workflows."""

    def __init__(
        self,
        config: RestoreConfig | None = None,
        store_factory: StoreFactory = open_zookeeper_store,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store_factory: Opens a store session per restore.
        """
        self._config = config or RestoreConfig.from_env()
        self._store_factory = store_factory

    @property
    def config(self) -> RestoreConfig:
        return self._config

    def restore(self, options: RestoreOptions) -> RestoreSummary:
        """Restore a snapshot.

        Args:
            options: Restore options.

        Returns:
            Counts for the completed run.

        Raises:
            ZkRestoreError: If the restore fails.
        """
        return restore_snapshot(options, self._config, self._store_factory)

    def with_hosts(self, zk_hosts: str) -> "RestoreClient":
        """Clone the client with a different ZooKeeper connect string."""
        return RestoreClient(replace(self._config, zk_hosts=zk_hosts), self._store_factory)

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered summary output lines.
        """
        return execute_run_spec_file(self, spec_file)
