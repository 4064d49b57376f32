"""Restore orchestration.

This module wires the snapshot decoder, ancestor tracker, materializer
and node restorer into one streaming, single-pass restore run. Records
are applied strictly one at a time; a failure aborts the run and leaves
whatever was already restored in place.
"""

from __future__ import annotations

from collections import Counter
from contextlib import AbstractContextManager
from typing import BinaryIO, Callable

from core.config import RestoreConfig
from core.logging_config import get_logger
from core.types import RestoreOptions, RestoreOutcome, RestoreSummary
from ingest.input_reader import open_snapshot_stream
from ingest.snapshot_decoder import iter_node_records
from restore.node_restorer import NodeRestorer
from restore.path_filtering import PathFilter
from restore.path_materializer import PathMaterializer
from restore.path_tracker import PathStackTracker
from store.node_store import NodeStore
from store.zookeeper_store import open_zookeeper_store

_LOGGER = get_logger(__name__)

StoreFactory = Callable[[RestoreConfig], AbstractContextManager[NodeStore]]


class RestoreRunner:
    """Single-use runner applying one snapshot stream to one store."""

    def __init__(
        self,
        options: RestoreOptions,
        store: NodeStore,
        path_filter: PathFilter | None = None,
    ) -> None:
        self._tracker = PathStackTracker()
        self._materializer = PathMaterializer(store)
        self._restorer = NodeRestorer(
            store,
            self._materializer,
            path_filter or PathFilter.from_options(options),
            overwrite_existing=options.overwrite_existing,
            no_acls=options.no_acls,
        )

    def run(self, stream: BinaryIO) -> RestoreSummary:
        """Restore every record in ``stream``.

        Args:
            stream: Binary snapshot stream.

        Returns:
            Counts for the completed run.

        Raises:
            MalformedSnapshotError: If the snapshot is invalid.
            StoreUnavailableError: If a store call fails.
        """
        outcome_counts: Counter[RestoreOutcome] = Counter()
        records_read = 0
        for record in iter_node_records(stream):
            records_read += 1
            implied_ancestors = self._tracker.push(record)
            outcome_counts[self._restorer.restore(record, implied_ancestors)] += 1
        return RestoreSummary(
            records_read=records_read,
            synthesized_paths=self._materializer.created_count,
            outcome_counts=dict(outcome_counts),
        )


def restore_snapshot(
    options: RestoreOptions,
    config: RestoreConfig,
    store_factory: StoreFactory = open_zookeeper_store,
) -> RestoreSummary:
    """Restore a snapshot into the configured store.

    The input stream and the store session are released on every exit
    path before any error reaches the caller.

    Args:
        options: Restore options.
        config: Runtime configuration.
        store_factory: Opens the store session for the run.

    Returns:
        Counts for the completed run.

    Raises:
        RestoreConfigError: If filtering options are invalid.
        RestoreInputError: If the snapshot cannot be opened.
        MalformedSnapshotError: If the snapshot is invalid.
        StoreUnavailableError: If the store fails.
    """
    path_filter = PathFilter.from_options(options)
    _LOGGER.info(
        "restore_started",
        input_uri=options.input_uri,
        root_path=path_filter.root_path,
        overwrite_existing=options.overwrite_existing,
        no_acls=options.no_acls,
    )
    with open_snapshot_stream(options.input_uri, options.compressed, config) as stream:
        with store_factory(config) as store:
            summary = RestoreRunner(options, store, path_filter).run(stream)
    _LOGGER.info(
        "restore_completed",
        records_read=summary.records_read,
        synthesized_paths=summary.synthesized_paths,
        **{outcome.value: count for outcome, count in summary.outcome_counts.items()},
    )
    return summary
