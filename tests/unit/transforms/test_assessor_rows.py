"""Unit tests for assessor derivation."""

from __future__ import annotations

from transforms.assessor_rows import reconcile_assessors


def test_reconcile_assessors_returns_distinct_ids_in_first_seen_order() -> None:
    """N rows with K distinct assessors should produce exactly K rows."""
    raw = [
        {"Assessor": "z_b"},
        {"Assessor": "z_a"},
        {"Assessor": "z_b"},
        {"Assessor": "z_c"},
        {"Assessor": "z_a"},
    ]

    rows = reconcile_assessors(raw)

    assert [row.anon_id for row in rows] == ["z_b", "z_a", "z_c"]


def test_reconcile_assessors_skips_rows_without_assessor_column() -> None:
    """Rows lacking an Assessor cell should not create an assessor."""
    rows = reconcile_assessors([{"proposal_id": "1"}, {"Assessor": "z_a"}])

    assert [row.anon_id for row in rows] == ["z_a"]


def test_reconcile_assessors_skips_blank_assessor_cells() -> None:
    """Empty or whitespace-only Assessor cells should not create an assessor."""
    rows = reconcile_assessors([{"Assessor": ""}, {"Assessor": "  "}, {"Assessor": "z_a"}])

    assert [row.anon_id for row in rows] == ["z_a"]
