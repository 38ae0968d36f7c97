"""Unit tests for run-spec execution."""

from __future__ import annotations

import pytest

from core.errors import CatalystRunSpecError
from core.run_spec_execution import execute_run_spec_file, render_push_summary
from core.types import PushOptions, PushSummary
from tests.fixture_paths import fixture_path


class _RecordingClient:
    def __init__(self) -> None:
        self.push_options: list[PushOptions] = []
        self.pinged_tables: list[str] = []

    def push(self, options: PushOptions) -> PushSummary:
        self.push_options.append(options)
        return PushSummary(
            fund_number=options.fund_number,
            fund_id=1,
            inserted_counts={"Challenges": 2},
            skipped_tables=("Funds",),
        )

    def ping(self, table: str) -> int:
        self.pinged_tables.append(table)
        return 5


def test_execute_run_spec_file_applies_defaults_and_step_flags() -> None:
    """Push steps should inherit the default fund and forward flags."""
    client = _RecordingClient()

    output = execute_run_spec_file(client, str(fixture_path("run_spec/push_and_ping.yaml")))

    assert client.push_options == [
        PushOptions(fund_number=9, skip_existing=True, include_derived_fields=True)
    ]
    assert client.pinged_tables == ["Assessments"]
    assert output == (
        "fund\t9\tid=1",
        "inserted\tChallenges\t2",
        "skipped\tFunds",
        "null_proposal_refs\t0",
        "Assessments\t5",
    )


def test_execute_run_spec_file_requires_fund_for_push() -> None:
    """Push steps without any fund number should fail."""
    client = _RecordingClient()

    with pytest.raises(CatalystRunSpecError, match="requires 'fund'"):
        execute_run_spec_file(client, str(fixture_path("run_spec/missing_fund.yaml")))

    assert client.push_options == []


def test_execute_run_spec_file_rejects_unknown_push_field() -> None:
    """Unexpected step fields should fail before the push runs."""
    client = _RecordingClient()

    with pytest.raises(CatalystRunSpecError, match="dry_run"):
        execute_run_spec_file(client, str(fixture_path("run_spec/unknown_push_field.yaml")))

    assert client.push_options == []


def test_render_push_summary_lists_counts_then_skips() -> None:
    """Summary lines should list inserts, skips and null proposal references."""
    summary = PushSummary(
        fund_number=9,
        fund_id=3,
        inserted_counts={"Assessors": 3, "Assessments": 5},
        skipped_tables=(),
        null_proposal_refs=2,
    )

    assert render_push_summary(summary) == (
        "fund\t9\tid=3",
        "inserted\tAssessors\t3",
        "inserted\tAssessments\t5",
        "null_proposal_refs\t2",
    )
