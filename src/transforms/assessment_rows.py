"""Assessment reconciliation transform.

This module maps assessment CSV rows onto Assessments rows, resolving
assessor, challenge, and proposal references for one Fund. Assessor and
challenge references are required; a proposal reference is optional
because some assessments address a challenge as a whole.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, Sequence

from core.constants import NOT_A_NUMBER
from core.types import (
    AssessmentReconciliation,
    AssessmentRow,
    RawRecord,
    StoredAssessor,
    StoredChallenge,
    StoredFund,
    StoredProposal,
)
from transforms.assessor_rows import ASSESSOR_COLUMN
from transforms.field_parsing import is_not_a_number, optional_text, parse_leading_int
from transforms.key_index import KeyIndex

IMPACT_NOTE_COLUMN = "Impact / Alignment Note"
IMPACT_RATING_COLUMN = "Impact / Alignment Rating"
FEASIBILITY_NOTE_COLUMN = "Feasibility Note"
FEASIBILITY_RATING_COLUMN = "Feasibility Rating"
AUDITABILITY_NOTE_COLUMN = "Auditability Note"
AUDITABILITY_RATING_COLUMN = "Auditability Rating"

# destination column -> CSV column copied verbatim
_TEXT_COLUMNS = {
    "proposer_mark": "Proposer Mark",
    "proposer_filteredout": "Proposer Filtered Out rationale or Feedback",
    "rating_excellent": "Excellent",
    "rating_good": "Good",
    "rating_filteredout": "Filtered Out",
    "vpa_feedback": "vPA Feedback",
    "blank": "Blank",
}


def reconcile_assessments(
    fund: StoredFund,
    challenges: Sequence[StoredChallenge],
    proposals: Sequence[StoredProposal],
    raw_assessments: Iterable[RawRecord],
    assessors: Sequence[StoredAssessor],
    include_derived_fields: bool = False,
) -> AssessmentReconciliation:
    """Build Assessments rows with resolved foreign keys.

    Args:
        fund: Parent Fund read back from the store.
        challenges: Challenges stored for the fund.
        proposals: Proposals stored for the fund.
        raw_assessments: Parsed assessment CSV rows.
        assessors: Assessors stored for the referenced anonymized ids.
        include_derived_fields: Also compute ``rating_avg`` and ``notes_len``.

    Returns:
        Rows in source order with the count of null proposal references.

    Raises:
        CatalystUnresolvedReferenceError: If an assessor or challenge
            reference cannot be resolved.
    """
    assessor_index = KeyIndex(assessors, lambda assessor: assessor.anon_id, "assessor")
    challenge_index = KeyIndex(challenges, lambda challenge: challenge.internal_id, "challenge")
    proposal_index = KeyIndex(proposals, lambda proposal: proposal.internal_id, "proposal")
    rows: list[AssessmentRow] = []
    unresolved_proposal_count = 0
    for row_number, raw in enumerate(raw_assessments, 1):
        context = f"assessment row {row_number} (fund {fund.number})"
        assessor = assessor_index.require(raw.get(ASSESSOR_COLUMN), context)
        challenge = challenge_index.require(parse_leading_int(raw.get("challenge_id")), context)
        proposal = proposal_index.find(parse_leading_int(raw.get("proposal_id")))
        if proposal is None:
            unresolved_proposal_count += 1
        row = _build_assessment_row(
            raw,
            fund_id=fund.id,
            assessor_id=assessor.id,
            challenge_id=challenge.id,
            proposal_id=None if proposal is None else proposal.id,
        )
        if include_derived_fields:
            row = _with_derived_fields(row)
        rows.append(row)
    return AssessmentReconciliation(
        rows=tuple(rows), unresolved_proposal_count=unresolved_proposal_count
    )


def _build_assessment_row(
    raw: RawRecord,
    fund_id: int,
    assessor_id: int,
    challenge_id: int,
    proposal_id: int | None,
) -> AssessmentRow:
    text_fields = {
        column: optional_text(raw.get(source)) for column, source in _TEXT_COLUMNS.items()
    }
    return AssessmentRow(
        assessor_id=assessor_id,
        proposal_id=proposal_id,
        challenge_id=challenge_id,
        fund_id=fund_id,
        impact_note=optional_text(raw.get(IMPACT_NOTE_COLUMN)),
        impact_rating=parse_leading_int(raw.get(IMPACT_RATING_COLUMN)),
        feasibility_note=optional_text(raw.get(FEASIBILITY_NOTE_COLUMN)),
        feasibility_rating=parse_leading_int(raw.get(FEASIBILITY_RATING_COLUMN)),
        auditability_note=optional_text(raw.get(AUDITABILITY_NOTE_COLUMN)),
        auditability_rating=parse_leading_int(raw.get(AUDITABILITY_RATING_COLUMN)),
        **text_fields,
    )


def _with_derived_fields(row: AssessmentRow) -> AssessmentRow:
    """Return a copy of the row carrying ``rating_avg`` and ``notes_len``."""
    ratings = [
        rating
        for rating in (row.impact_rating, row.feasibility_rating, row.auditability_rating)
        if not is_not_a_number(rating)
    ]
    rating_avg = math.fsum(ratings) / len(ratings) if ratings else NOT_A_NUMBER
    notes = (row.impact_note, row.feasibility_note, row.auditability_note)
    notes_len = sum(len(note) for note in notes if note)
    return replace(row, rating_avg=rating_avg, notes_len=notes_len)
