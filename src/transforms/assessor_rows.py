"""Assessor derivation transform."""

from __future__ import annotations

from typing import Iterable

from core.types import AssessorRow, RawRecord

ASSESSOR_COLUMN = "Assessor"


def reconcile_assessors(raw_assessments: Iterable[RawRecord]) -> list[AssessorRow]:
    """Collect distinct assessor ids from raw assessment rows.

    Args:
        raw_assessments: Parsed assessment CSV rows.

    Returns:
        One row per distinct non-blank ``Assessor`` value, in first-occurrence order.
    """
    seen_ids: set[str] = set()
    rows: list[AssessorRow] = []
    for raw in raw_assessments:
        anon_id = raw.get(ASSESSOR_COLUMN)
        if anon_id is None or not str(anon_id).strip() or anon_id in seen_ids:
            continue
        seen_ids.add(anon_id)
        rows.append(AssessorRow(anon_id=anon_id))
    return rows
