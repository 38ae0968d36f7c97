"""Shared typed models.

This module defines immutable row models and collaborator protocols
used by ingest, transforms, and store layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Mapping, Protocol, Sequence

RawRecord = Mapping[str, Any]


class _InsertRow:
    """Base for destination rows serialized into insert payloads."""

    omit_when_none: ClassVar[tuple[str, ...]] = ()

    def to_payload(self) -> dict[str, object]:
        """Return the column mapping sent to the store."""
        payload = asdict(self)  # type: ignore[call-overload]
        for column in self.omit_when_none:
            if payload.get(column) is None:
                payload.pop(column, None)
        return payload


@dataclass(frozen=True)
class FundRow(_InsertRow):
    """Insert row for the Funds table."""

    title: str
    number: int


@dataclass(frozen=True)
class ChallengeRow(_InsertRow):
    """Insert row for the Challenges table.

    Attributes:
        internal_id: Challenge id from the voter-tool dataset.
        title: Challenge title.
        brief: Challenge description.
        budget: Challenge funding amount.
        currency: Budget currency symbol.
        url: Public challenge page.
        challenge_setting: Whether the title names a challenge-setting round.
        fund_id: Surrogate key of the parent Fund.
    """

    internal_id: Any
    title: Any
    brief: Any
    budget: Any
    currency: str
    url: Any
    challenge_setting: bool
    fund_id: int


@dataclass(frozen=True)
class ProposalRow(_InsertRow):
    """Insert row for the Proposals table."""

    internal_id: Any
    title: Any
    url: Any
    author: Any
    problem_statement: Any
    problem_solution: Any
    relevant_experience: Any
    budget: Any
    currency: str
    tags: Any
    challenge_id: int
    fund_id: int


@dataclass(frozen=True)
class AssessorRow(_InsertRow):
    """Insert row for the Assessors table."""

    anon_id: str


@dataclass(frozen=True)
class AssessmentRow(_InsertRow):
    """Insert row for the Assessments table.

    Ratings are integers, or NaN when the source cell held no number.
    ``rating_avg`` and ``notes_len`` are only sent when computed.
    """

    omit_when_none: ClassVar[tuple[str, ...]] = ("rating_avg", "notes_len")

    assessor_id: int
    proposal_id: int | None
    challenge_id: int
    fund_id: int
    impact_note: str | None
    impact_rating: float
    feasibility_note: str | None
    feasibility_rating: float
    auditability_note: str | None
    auditability_rating: float
    proposer_mark: str | None
    proposer_filteredout: str | None
    rating_excellent: str | None
    rating_good: str | None
    rating_filteredout: str | None
    vpa_feedback: str | None
    blank: str | None
    rating_avg: float | None = None
    notes_len: int | None = None


@dataclass(frozen=True)
class StoredFund:
    """Fund row read back from the store."""

    id: int
    number: int
    title: str | None = None


@dataclass(frozen=True)
class StoredChallenge:
    """Challenge row read back from the store, keyed by internal id."""

    id: int
    internal_id: float
    title: str | None = None


@dataclass(frozen=True)
class StoredProposal:
    """Proposal row read back from the store, keyed by internal id."""

    id: int
    internal_id: float
    title: str | None = None


@dataclass(frozen=True)
class StoredAssessor:
    """Assessor row read back from the store, keyed by anonymized id."""

    id: int
    anon_id: str


@dataclass(frozen=True)
class AssessmentReconciliation:
    """Reconciled assessment rows with optional-reference accounting.

    Attributes:
        rows: Rows ready for insertion, in source order.
        unresolved_proposal_count: Rows whose proposal reference is null.
    """

    rows: tuple[AssessmentRow, ...]
    unresolved_proposal_count: int


@dataclass(frozen=True)
class PushOptions:
    """Push command options.

    Attributes:
        fund_number: Fund round to push.
        skip_existing: Skip tables that already hold rows for the fund.
        include_derived_fields: Add ``rating_avg`` and ``notes_len`` to assessments.
    """

    fund_number: int
    skip_existing: bool = True
    include_derived_fields: bool = False


@dataclass(frozen=True)
class PushSummary:
    """Outcome of one push run.

    Attributes:
        fund_number: Fund round pushed.
        fund_id: Surrogate key of the Fund row.
        inserted_counts: Inserted row count per table, in pipeline order.
        skipped_tables: Tables left untouched because rows already existed.
        null_proposal_refs: Assessments stored without a proposal reference.
    """

    fund_number: int
    fund_id: int
    inserted_counts: Mapping[str, int] = field(default_factory=dict)
    skipped_tables: tuple[str, ...] = ()
    null_proposal_refs: int = 0


class RowStore(Protocol):
    """Relational store operations required by the push pipeline."""

    def select_rows(
        self,
        table: str,
        filters: Mapping[str, object] | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]: ...

    def insert_rows(self, table: str, rows: Sequence[Mapping[str, object]]) -> int: ...


class RecordSource(Protocol):
    """Raw record fetch operations required by the push pipeline."""

    def fetch_challenges(self, fund_number: int) -> list[dict[str, Any]]: ...

    def fetch_proposals(self, fund_number: int) -> list[dict[str, Any]]: ...

    def fetch_assessments(self, fund_number: int) -> list[dict[str, Any]]: ...
