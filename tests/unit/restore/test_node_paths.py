"""Unit tests for node path helpers."""

from __future__ import annotations

from restore.node_paths import ancestor_paths, is_at_or_under, is_descendant, parent_path


def test_parent_path_of_top_level_node_is_root() -> None:
    """Top-level nodes and the root itself have the root as parent."""
    assert (parent_path("/a"), parent_path("/"), parent_path("/a/b/c")) == ("/", "/", "/a/b")


def test_is_descendant_respects_separator_boundaries() -> None:
    """Sibling names sharing a prefix are not descendants."""
    assert is_descendant("/a/b", "/a") and not is_descendant("/ab", "/a")


def test_everything_but_root_descends_from_root() -> None:
    """The root is an ancestor of every other path."""
    assert is_descendant("/a", "/") and not is_descendant("/", "/")


def test_is_at_or_under_includes_the_root_itself() -> None:
    """The configured root path is part of its own subtree."""
    assert is_at_or_under("/a", "/a") and not is_at_or_under("/b", "/a")


def test_ancestor_paths_are_top_down() -> None:
    """Ancestors are listed from the outermost inwards."""
    assert ancestor_paths("/a/b/c") == ("/a", "/a/b") and ancestor_paths("/a") == ()
