"""zkrestore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ZkRestoreError(Exception):
    """Base exception for all zkrestore failures."""


class RestoreConfigError(ZkRestoreError):
    """Raised for invalid runtime configuration or restore options."""


class RestoreInputError(ZkRestoreError):
    """Raised when the snapshot input cannot be opened or read."""


class MalformedSnapshotError(ZkRestoreError):
    """Raised when the snapshot stream violates the backup format."""


class RestoreStoreError(ZkRestoreError):
    """Raised for coordination-store failures."""


class StoreUnavailableError(RestoreStoreError):
    """Raised when the store session or a store call fails."""


class NodeExistsStoreError(RestoreStoreError):
    """Raised by a store when creating a node that already exists."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Node already exists: {path}")
        self.path = path


class RestoreDependencyError(ZkRestoreError):
    """Raised when an optional runtime dependency is missing."""


class RestoreRunSpecError(ZkRestoreError):
    """Raised for invalid or unsupported run-spec configuration."""
