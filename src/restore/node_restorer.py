"""Single-node restore policy.

This module applies one decoded record to the store: filtering first,
then ancestor materialization, then create-or-overwrite.
"""

from __future__ import annotations

from typing import Sequence

from kazoo.security import ACL

from core.constants import ANY_VERSION, ROOT_PATH
from core.errors import NodeExistsStoreError
from core.logging_config import get_logger
from core.types import NodeRecord, RestoreOutcome
from restore.node_paths import ancestor_paths, parent_path
from restore.path_filtering import PathFilter
from restore.path_materializer import PathMaterializer
from store.acl_translation import OPEN_ACL_UNSAFE, translate_acls
from store.node_store import NodeStore

_LOGGER = get_logger(__name__)

_SKIP_EVENTS = {
    RestoreOutcome.SKIPPED_EPHEMERAL: "skipping_ephemeral_node",
    RestoreOutcome.SKIPPED_OUTSIDE_ROOT: "skipping_node_outside_root",
    RestoreOutcome.SKIPPED_EXCLUDED: "skipping_excluded_node",
    RestoreOutcome.SKIPPED_NOT_INCLUDED: "skipping_node_not_included",
}


class NodeRestorer:
    """Applies records to the store under one conflict policy."""

    def __init__(
        self,
        store: NodeStore,
        materializer: PathMaterializer,
        path_filter: PathFilter,
        overwrite_existing: bool = False,
        no_acls: bool = False,
    ) -> None:
        self._store = store
        self._materializer = materializer
        self._filter = path_filter
        self._overwrite_existing = overwrite_existing
        self._no_acls = no_acls

    def restore(
        self,
        record: NodeRecord,
        implied_ancestors: Sequence[str] = (),
    ) -> RestoreOutcome:
        """Restore one record.

        Skipped records cause no store calls at all. Kept records first get
        their parent chain materialized, then are created; an existing node
        is overwritten or left alone depending on policy.

        Args:
            record: Decoded node record.
            implied_ancestors: Ancestor paths with no record in the stream;
                other missing ancestors had their records skipped.

        Returns:
            What happened to the record.

        Raises:
            StoreUnavailableError: If a store call fails.
        """
        skip_outcome = self._filter.classify(record)
        if skip_outcome is not None:
            _log_skip(record, skip_outcome, self._filter.root_path)
            return skip_outcome
        self._log_synthesized_ancestors(record, implied_ancestors)
        self._materializer.ensure_path(parent_path(record.path))
        outcome = self._create_or_update(record)
        self._materializer.mark_created(record.path)
        return outcome

    def _log_synthesized_ancestors(
        self,
        record: NodeRecord,
        implied_ancestors: Sequence[str],
    ) -> None:
        for ancestor in ancestor_paths(record.path):
            if not self._materializer.was_created(ancestor):
                _LOGGER.debug(
                    "synthesizing_ancestor_path",
                    path=ancestor,
                    child=record.path,
                    record_skipped=ancestor not in implied_ancestors,
                )

    def _create_or_update(self, record: NodeRecord) -> RestoreOutcome:
        acls = self._acls_for(record)
        if record.path != ROOT_PATH:
            try:
                self._store.create(record.path, record.data, acls)
            except NodeExistsStoreError:
                return self._handle_existing(record, acls)
            _LOGGER.info("node_created", path=record.path)
            return RestoreOutcome.CREATED
        # The root always exists.
        return self._handle_existing(record, acls)

    def _handle_existing(self, record: NodeRecord, acls: Sequence[ACL]) -> RestoreOutcome:
        if not self._overwrite_existing:
            _LOGGER.warning("node_already_exists", path=record.path)
            return RestoreOutcome.CONFLICT_SKIPPED
        if not self._no_acls:
            self._store.set_acls(record.path, acls, version=ANY_VERSION)
        self._store.set_data(record.path, record.data, version=ANY_VERSION)
        _LOGGER.info("node_overwritten", path=record.path)
        return RestoreOutcome.OVERWRITTEN

    def _acls_for(self, record: NodeRecord) -> list[ACL]:
        if self._no_acls:
            return list(OPEN_ACL_UNSAFE)
        return translate_acls(record.acls)


def _log_skip(record: NodeRecord, outcome: RestoreOutcome, root_path: str) -> None:
    event = _SKIP_EVENTS[outcome]
    if outcome is RestoreOutcome.SKIPPED_OUTSIDE_ROOT:
        _LOGGER.info(event, path=record.path, root_path=root_path)
    elif outcome is RestoreOutcome.SKIPPED_EPHEMERAL:
        _LOGGER.info(event, path=record.path, ephemeral_owner=record.ephemeral_owner)
    else:
        _LOGGER.debug(event, path=record.path)
