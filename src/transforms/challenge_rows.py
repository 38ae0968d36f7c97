"""Challenge reconciliation transform.

This module maps voter-tool challenge records onto Challenges rows
for one Fund and flags challenge-setting categories by title.
"""

from __future__ import annotations

from typing import Iterable

from core.constants import DEFAULT_CURRENCY
from core.types import ChallengeRow, RawRecord, StoredFund
from transforms.field_parsing import is_challenge_setting


def reconcile_challenges(
    raw_challenges: Iterable[RawRecord],
    fund: StoredFund,
) -> list[ChallengeRow]:
    """Build Challenges rows from raw challenge records.

    Args:
        raw_challenges: Records with ``id``, ``title``, ``description``,
            ``amount`` and ``url`` fields.
        fund: Parent Fund read back from the store.

    Returns:
        Challenge rows in source order.
    """
    return [
        ChallengeRow(
            internal_id=raw.get("id"),
            title=raw.get("title"),
            brief=raw.get("description"),
            budget=raw.get("amount"),
            currency=DEFAULT_CURRENCY,
            url=raw.get("url"),
            challenge_setting=is_challenge_setting(raw.get("title")),
            fund_id=fund.id,
        )
        for raw in raw_challenges
    ]
