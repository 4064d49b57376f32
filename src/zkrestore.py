"""Public SDK surface for zkrestore.

This module provides a stable import path for library users.
It re-exports the restore client and typed option models.
"""

from __future__ import annotations

from core.config import RestoreConfig
from core.errors import (
    MalformedSnapshotError,
    RestoreConfigError,
    RestoreInputError,
    StoreUnavailableError,
    ZkRestoreError,
)
from core.types import AclEntry, NodeRecord, RestoreOptions, RestoreOutcome, RestoreSummary
from ingest.snapshot_decoder import iter_node_records
from restore.pipeline import RestoreRunner, restore_snapshot
from restore.restore_client import RestoreClient

__all__ = [
    "AclEntry",
    "MalformedSnapshotError",
    "NodeRecord",
    "RestoreClient",
    "RestoreConfig",
    "RestoreConfigError",
    "RestoreInputError",
    "RestoreOptions",
    "RestoreOutcome",
    "RestoreRunner",
    "RestoreSummary",
    "StoreUnavailableError",
    "ZkRestoreError",
    "iter_node_records",
    "restore_snapshot",
]
