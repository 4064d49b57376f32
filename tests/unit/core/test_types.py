"""Unit tests for shared typed models."""

from __future__ import annotations

from core.types import NodeRecord, RestoreOutcome, RestoreSummary


def test_summary_lines_list_every_outcome() -> None:
    """Summary output includes zero counts for unseen outcomes."""
    summary = RestoreSummary(
        records_read=3,
        synthesized_paths=1,
        outcome_counts={RestoreOutcome.CREATED: 2, RestoreOutcome.SKIPPED_EPHEMERAL: 1},
    )

    lines = summary.to_lines()

    assert lines[:3] == ("records_read=3", "synthesized_paths=1", "created=2") and (
        "conflict_skipped=0" in lines
    )


def test_node_record_ephemeral_flag() -> None:
    """Non-zero owners mark ephemeral nodes."""
    assert NodeRecord("/a", 5, None).is_ephemeral and not NodeRecord("/a", 0, None).is_ephemeral
