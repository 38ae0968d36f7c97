"""Proposal reconciliation transform.

This module maps voter-tool proposal records onto Proposals rows,
resolving each proposal's challenge from its category code.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.constants import DEFAULT_CURRENCY
from core.types import ProposalRow, RawRecord, StoredChallenge, StoredFund
from transforms.field_parsing import parse_leading_int
from transforms.key_index import KeyIndex

# current field name -> legacy field name used by older fund datasets
_LEGACY_FIELD_NAMES = {
    "problem_solution": "how_does_success_look_like_",
    "relevant_experience": "importance",
}


def reconcile_proposals(
    raw_proposals: Iterable[RawRecord],
    fund: StoredFund,
    challenges: Sequence[StoredChallenge],
) -> list[ProposalRow]:
    """Build Proposals rows and resolve their challenge references.

    Args:
        raw_proposals: Raw voter-tool proposal records.
        fund: Parent Fund read back from the store.
        challenges: Challenges already stored for the fund.

    Returns:
        Proposal rows in source order.

    Raises:
        CatalystUnresolvedReferenceError: If any proposal category matches
            no challenge ``internal_id``. No rows are returned in that case.
    """
    challenge_index = KeyIndex(challenges, lambda challenge: challenge.internal_id, "challenge")
    rows: list[ProposalRow] = []
    for raw in raw_proposals:
        challenge = challenge_index.require(
            parse_leading_int(raw.get("category")),
            f"proposal {raw.get('id')!r} (category {raw.get('category')!r}, fund {fund.number})",
        )
        rows.append(
            ProposalRow(
                internal_id=raw.get("id"),
                title=raw.get("title"),
                url=raw.get("url"),
                author=raw.get("author"),
                problem_statement=raw.get("description"),
                problem_solution=_current_or_legacy(raw, "problem_solution"),
                relevant_experience=_current_or_legacy(raw, "relevant_experience"),
                budget=raw.get("requested_funds"),
                currency=DEFAULT_CURRENCY,
                tags=raw.get("tags"),
                challenge_id=challenge.id,
                fund_id=fund.id,
            )
        )
    return rows


def _current_or_legacy(raw: RawRecord, field_name: str) -> object:
    """Read a field, using its legacy name only when the current key is absent."""
    if field_name in raw:
        return raw[field_name]
    return raw.get(_LEGACY_FIELD_NAMES[field_name])
