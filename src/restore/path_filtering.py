"""Record filtering rules for restore runs.

This module decides which decoded records are applied to the store.
Ephemeral nodes, nodes outside the root path, excluded paths and paths
missing every include pattern are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from core.constants import PATH_SEPARATOR, ROOT_PATH
from core.errors import RestoreConfigError
from core.types import NodeRecord, RestoreOptions, RestoreOutcome
from restore.node_paths import is_at_or_under


@dataclass(frozen=True)
class PathFilter:
    """Compiled filtering rules.

    Attributes:
        root_path: Only nodes at or under this path are kept.
        include_patterns: A kept path must fully match one of these, if any.
        exclude_patterns: A path fully matching any of these is skipped.
    """

    root_path: str = ROOT_PATH
    include_patterns: tuple[re.Pattern[str], ...] = ()
    exclude_patterns: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def from_options(cls, options: RestoreOptions) -> "PathFilter":
        """Compile filtering rules from restore options.

        Raises:
            RestoreConfigError: If the root path or a pattern is invalid.
        """
        return cls(
            root_path=_normalize_root_path(options.root_path),
            include_patterns=_compile_patterns(options.include_patterns, "include"),
            exclude_patterns=_compile_patterns(options.exclude_patterns, "exclude"),
        )

    def classify(self, record: NodeRecord) -> RestoreOutcome | None:
        """Return the skip outcome for ``record``, or None if it is kept."""
        if record.is_ephemeral:
            return RestoreOutcome.SKIPPED_EPHEMERAL
        if not is_at_or_under(record.path, self.root_path):
            return RestoreOutcome.SKIPPED_OUTSIDE_ROOT
        if self.is_excluded(record.path):
            return RestoreOutcome.SKIPPED_EXCLUDED
        if not self.is_included(record.path):
            return RestoreOutcome.SKIPPED_NOT_INCLUDED
        return None

    def is_excluded(self, path: str) -> bool:
        return any(pattern.fullmatch(path) for pattern in self.exclude_patterns)

    def is_included(self, path: str) -> bool:
        if not self.include_patterns:
            return True
        return any(pattern.fullmatch(path) for pattern in self.include_patterns)


def _normalize_root_path(root_path: str) -> str:
    if not root_path.startswith(PATH_SEPARATOR):
        raise RestoreConfigError(
            f"Invalid root path '{root_path}': expected an absolute path such as /app."
        )
    if root_path != ROOT_PATH:
        root_path = root_path.rstrip(PATH_SEPARATOR) or ROOT_PATH
    return root_path


def _compile_patterns(raw_patterns: Iterable[str], kind: str) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for raw_pattern in raw_patterns:
        try:
            compiled.append(re.compile(raw_pattern))
        except re.error as error:
            raise RestoreConfigError(
                f"Invalid {kind} pattern '{raw_pattern}': {error}. "
                "Provide a valid regular expression."
            ) from error
    return tuple(compiled)
