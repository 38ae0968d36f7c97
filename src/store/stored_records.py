"""Typed parsing of rows read back from the store.

This module converts raw select results into stored-record models
carrying surrogate ids and normalized business keys.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.errors import CatalystStoreError
from core.types import StoredAssessor, StoredChallenge, StoredFund, StoredProposal
from transforms.field_parsing import parse_leading_int


def parse_fund(row: Mapping[str, Any]) -> StoredFund:
    """Parse a Funds row."""
    return StoredFund(
        id=_required_id(row, "Funds"),
        number=int(_required_field(row, "number", "Funds")),
        title=row.get("title"),
    )


def parse_challenge(row: Mapping[str, Any]) -> StoredChallenge:
    """Parse a Challenges row keyed by its integer internal id."""
    return StoredChallenge(
        id=_required_id(row, "Challenges"),
        internal_id=parse_leading_int(_required_field(row, "internal_id", "Challenges")),
        title=row.get("title"),
    )


def parse_proposal(row: Mapping[str, Any]) -> StoredProposal:
    """Parse a Proposals row keyed by its integer internal id."""
    return StoredProposal(
        id=_required_id(row, "Proposals"),
        internal_id=parse_leading_int(_required_field(row, "internal_id", "Proposals")),
        title=row.get("title"),
    )


def parse_assessor(row: Mapping[str, Any]) -> StoredAssessor:
    """Parse an Assessors row."""
    return StoredAssessor(
        id=_required_id(row, "Assessors"),
        anon_id=str(_required_field(row, "anon_id", "Assessors")),
    )


def _required_id(row: Mapping[str, Any], table: str) -> int:
    value = _required_field(row, "id", table)
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalystStoreError(
            f"Invalid {table} row from store: expected integer 'id', got {value!r}."
        )
    return value


def _required_field(row: Mapping[str, Any], field_name: str, table: str) -> Any:
    value = row.get(field_name)
    if value is None:
        raise CatalystStoreError(
            f"Invalid {table} row from store: missing '{field_name}'. "
            "Select the full row or check the table schema."
        )
    return value
