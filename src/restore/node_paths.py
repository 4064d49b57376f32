"""Slash-delimited node path helpers."""

from __future__ import annotations

from core.constants import PATH_SEPARATOR, ROOT_PATH


def parent_path(path: str) -> str:
    """Return the parent of ``path``; the root is its own parent."""
    last_separator = path.rfind(PATH_SEPARATOR)
    return path[:last_separator] if last_separator > 0 else ROOT_PATH


def is_descendant(path: str, ancestor: str) -> bool:
    """Return whether ``path`` lies strictly below ``ancestor``.

    Matching happens on separator boundaries, so ``/ab`` is not below ``/a``.
    """
    if ancestor == ROOT_PATH:
        return path != ROOT_PATH
    return path.startswith(ancestor + PATH_SEPARATOR)


def is_at_or_under(path: str, root: str) -> bool:
    """Return whether ``path`` equals ``root`` or lies below it."""
    return path == root or is_descendant(path, root)


def ancestor_paths(path: str) -> tuple[str, ...]:
    """Return proper ancestors of ``path`` top-down, excluding the root.

    ``/a/b/c`` yields ``("/a", "/a/b")``.
    """
    ancestors: list[str] = []
    current = parent_path(path)
    while current != ROOT_PATH:
        ancestors.append(current)
        current = parent_path(current)
    ancestors.reverse()
    return tuple(ancestors)
