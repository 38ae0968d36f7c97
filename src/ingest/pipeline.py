"""Push orchestration for one Fund.

This module sequences fetch, reconcile, and deliver for each table in
dependency order (Fund, Challenges, Proposals, Assessors, Assessments).
Each stage reads back the surrogate ids assigned by the store so the
next stage can resolve its foreign keys. A failing stage aborts the run
and leaves tables written by earlier stages in place.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, TypeVar

from core.constants import (
    ASSESSMENTS_TABLE,
    ASSESSOR_LOOKUP_BATCH_SIZE,
    ASSESSORS_TABLE,
    CHALLENGES_TABLE,
    FUNDS_TABLE,
    PROPOSALS_TABLE,
)
from core.errors import CatalystError, CatalystNotFoundError
from core.logging_config import get_logger
from core.types import (
    FundRow,
    PushOptions,
    PushSummary,
    RecordSource,
    RowStore,
    StoredAssessor,
    StoredChallenge,
    StoredFund,
    StoredProposal,
)
from store.chunked_delivery import deliver_rows
from store.stored_records import parse_assessor, parse_challenge, parse_fund, parse_proposal
from transforms.assessment_rows import reconcile_assessments
from transforms.assessor_rows import reconcile_assessors
from transforms.challenge_rows import reconcile_challenges
from transforms.field_parsing import parse_leading_int
from transforms.proposal_rows import reconcile_proposals

_LOGGER = get_logger(__name__)

StageResultT = TypeVar("StageResultT")
StoredT = TypeVar("StoredT")


class PushPipelineRunner:
    """Sequential runner pushing one Fund's data into the store."""

    def __init__(self, options: PushOptions, store: RowStore, source: RecordSource) -> None:
        self._options = options
        self._store = store
        self._source = source
        self._inserted_counts: dict[str, int] = {}
        self._skipped_tables: list[str] = []
        self._null_proposal_refs = 0

    def run(self) -> PushSummary:
        """Execute every stage in order and return the run summary."""
        _LOGGER.info(
            "push_started",
            fund_number=self._options.fund_number,
            skip_existing=self._options.skip_existing,
        )
        fund = self._run_stage("resolve_fund", self._resolve_fund)
        challenges = self._run_stage("resolve_challenges", self._resolve_challenges, fund)
        proposals = self._run_stage(
            "resolve_proposals", self._resolve_proposals, fund, challenges
        )
        assessment_source = self._run_stage("resolve_assessors", self._resolve_assessors, fund)
        if assessment_source is not None:
            raw_assessments, assessors = assessment_source
            self._run_stage(
                "resolve_assessments",
                self._resolve_assessments,
                fund,
                challenges,
                proposals,
                raw_assessments,
                assessors,
            )
        summary = PushSummary(
            fund_number=fund.number,
            fund_id=fund.id,
            inserted_counts=dict(self._inserted_counts),
            skipped_tables=tuple(self._skipped_tables),
            null_proposal_refs=self._null_proposal_refs,
        )
        _LOGGER.info(
            "push_completed",
            fund_number=summary.fund_number,
            fund_id=summary.fund_id,
            inserted_counts=summary.inserted_counts,
            skipped_tables=list(summary.skipped_tables),
            null_proposal_refs=summary.null_proposal_refs,
        )
        return summary

    def _run_stage(
        self,
        stage: str,
        action: Callable[..., StageResultT],
        *args: Any,
    ) -> StageResultT:
        _LOGGER.info("push_stage_started", stage=stage, fund_number=self._options.fund_number)
        try:
            result = action(*args)
        except CatalystError as error:
            _LOGGER.error(
                "push_stage_failed",
                stage=stage,
                fund_number=self._options.fund_number,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise
        _LOGGER.info("push_stage_completed", stage=stage, fund_number=self._options.fund_number)
        return result

    def _resolve_fund(self) -> StoredFund:
        fund_number = self._options.fund_number
        existing_numbers = {
            parse_leading_int(row.get("number"))
            for row in self._store.select_rows(FUNDS_TABLE, columns="number")
        }
        if fund_number in existing_numbers:
            _LOGGER.info("fund_insert_skipped", fund_number=fund_number)
            self._skipped_tables.append(FUNDS_TABLE)
        else:
            fund_row = FundRow(title=f"Fund {fund_number}", number=fund_number)
            self._deliver(FUNDS_TABLE, [fund_row.to_payload()])
        rows = self._store.select_rows(FUNDS_TABLE, filters={"number": fund_number})
        if not rows:
            raise CatalystNotFoundError(
                f"Fund {fund_number} record not found in table {FUNDS_TABLE}. "
                "Check that the insert succeeded and the key has read access."
            )
        if len(rows) > 1:
            _LOGGER.warning("fund_duplicated", fund_number=fund_number, row_count=len(rows))
        return parse_fund(rows[0])

    def _resolve_challenges(self, fund: StoredFund) -> list[StoredChallenge]:
        if self._should_skip_table(CHALLENGES_TABLE, fund):
            self._skipped_tables.append(CHALLENGES_TABLE)
        else:
            raw_challenges = self._source.fetch_challenges(fund.number)
            rows = reconcile_challenges(raw_challenges, fund)
            self._deliver(CHALLENGES_TABLE, [row.to_payload() for row in rows])
        return self._read_back(CHALLENGES_TABLE, fund, parse_challenge)

    def _resolve_proposals(
        self,
        fund: StoredFund,
        challenges: Sequence[StoredChallenge],
    ) -> list[StoredProposal]:
        if self._should_skip_table(PROPOSALS_TABLE, fund):
            self._skipped_tables.append(PROPOSALS_TABLE)
        else:
            raw_proposals = self._source.fetch_proposals(fund.number)
            rows = reconcile_proposals(raw_proposals, fund, challenges)
            self._deliver(PROPOSALS_TABLE, [row.to_payload() for row in rows])
        return self._read_back(PROPOSALS_TABLE, fund, parse_proposal)

    def _resolve_assessors(
        self,
        fund: StoredFund,
    ) -> tuple[list[dict[str, Any]], list[StoredAssessor]] | None:
        """Insert assessors not yet stored and return them with the raw rows.

        Returns None when assessments for the fund already exist and are skipped.
        """
        if self._should_skip_table(ASSESSMENTS_TABLE, fund):
            self._skipped_tables.extend((ASSESSORS_TABLE, ASSESSMENTS_TABLE))
            return None
        raw_assessments = self._source.fetch_assessments(fund.number)
        candidate_rows = reconcile_assessors(raw_assessments)
        wanted_ids = [row.anon_id for row in candidate_rows]
        stored_assessors = self._select_assessors(wanted_ids)
        known_ids = {assessor.anon_id for assessor in stored_assessors}
        new_rows = [row for row in candidate_rows if row.anon_id not in known_ids]
        _LOGGER.info(
            "assessors_reconciled",
            fund_number=fund.number,
            distinct_count=len(candidate_rows),
            new_count=len(new_rows),
        )
        self._deliver(ASSESSORS_TABLE, [row.to_payload() for row in new_rows])
        assessors = self._select_assessors(wanted_ids) if new_rows else stored_assessors
        if not assessors:
            raise CatalystNotFoundError(
                f"No {ASSESSORS_TABLE} rows found for Fund {fund.number} assessments. "
                "Check that the assessments CSV has an 'Assessor' column with values."
            )
        return raw_assessments, assessors

    def _resolve_assessments(
        self,
        fund: StoredFund,
        challenges: Sequence[StoredChallenge],
        proposals: Sequence[StoredProposal],
        raw_assessments: Sequence[Mapping[str, Any]],
        assessors: Sequence[StoredAssessor],
    ) -> None:
        reconciliation = reconcile_assessments(
            fund,
            challenges,
            proposals,
            raw_assessments,
            assessors,
            include_derived_fields=self._options.include_derived_fields,
        )
        if reconciliation.unresolved_proposal_count:
            _LOGGER.warning(
                "assessment_proposal_unresolved",
                fund_number=fund.number,
                row_count=reconciliation.unresolved_proposal_count,
            )
        self._null_proposal_refs = reconciliation.unresolved_proposal_count
        self._deliver(ASSESSMENTS_TABLE, [row.to_payload() for row in reconciliation.rows])

    def _should_skip_table(self, table: str, fund: StoredFund) -> bool:
        """Return whether a fund-scoped table is skipped because rows exist."""
        if not self._options.skip_existing:
            return False
        existing_rows = self._store.select_rows(table, filters={"fund_id": fund.id}, columns="id")
        if not existing_rows:
            return False
        _LOGGER.info(
            "table_insert_skipped",
            table=table,
            fund_number=fund.number,
            existing_count=len(existing_rows),
        )
        return True

    def _read_back(
        self,
        table: str,
        fund: StoredFund,
        parse_row: Callable[[Mapping[str, Any]], StoredT],
    ) -> list[StoredT]:
        rows = self._store.select_rows(table, filters={"fund_id": fund.id})
        if not rows:
            raise CatalystNotFoundError(
                f"No {table} rows found for Fund {fund.number} (fund_id={fund.id}). "
                "Check the source data and that the insert succeeded."
            )
        return [parse_row(row) for row in rows]

    def _select_assessors(self, anon_ids: Sequence[str]) -> list[StoredAssessor]:
        """Select stored assessors by anonymized id, one bounded batch per request."""
        assessors: list[StoredAssessor] = []
        for start in range(0, len(anon_ids), ASSESSOR_LOOKUP_BATCH_SIZE):
            batch = tuple(anon_ids[start : start + ASSESSOR_LOOKUP_BATCH_SIZE])
            rows = self._store.select_rows(ASSESSORS_TABLE, filters={"anon_id": batch})
            assessors.extend(parse_assessor(row) for row in rows)
        return assessors

    def _deliver(self, table: str, rows: Sequence[Mapping[str, object]]) -> None:
        inserted_count = deliver_rows(self._store, table, rows)
        self._inserted_counts[table] = self._inserted_counts.get(table, 0) + inserted_count
        _LOGGER.info("table_delivered", table=table, inserted_count=inserted_count)


def push_fund_data(options: PushOptions, store: RowStore, source: RecordSource) -> None:
    """Push one Fund's challenges, proposals, assessors, and assessments.

    Args:
        options: Push options with the fund number.
        store: Destination row store.
        source: Raw record source.

    Raises:
        CatalystFetchError: If a source cannot be fetched.
        CatalystStoreError: If the store rejects a select or insert.
        CatalystNotFoundError: If required rows are missing after insertion.
        CatalystUnresolvedReferenceError: If a required foreign key cannot be resolved.
    """
    PushPipelineRunner(options, store, source).run()
