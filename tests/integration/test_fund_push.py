"""Integration tests for the fund push workflow."""

from __future__ import annotations

import math

from catalyst_sb import CatalystClient, CatalystConfig, PushOptions
from tests.fake_store import InMemoryStore, load_fund9_source
from tests.fixture_paths import fixture_path


def test_fund_push_and_ping_flow() -> None:
    """End-to-end flow should load a fund and leave consistent references."""
    store = InMemoryStore()
    config = CatalystConfig(supabase_url=None, supabase_key=None)

    with CatalystClient(config, store=store, source=load_fund9_source()) as client:
        summary = client.push(PushOptions(fund_number=9))
        assessment_count = client.ping("Assessments")

    fund_id = summary.fund_id
    proposal_ids = {row["internal_id"]: row["id"] for row in store.tables["Proposals"]}
    assessments = store.tables["Assessments"]
    assert assessment_count == 5
    assert all(row["fund_id"] == fund_id for row in store.tables["Challenges"])
    assert [row["proposal_id"] for row in assessments] == [
        proposal_ids[101],
        proposal_ids[102],
        proposal_ids[103],
        None,
        None,
    ]
    assert math.isnan(assessments[1]["auditability_rating"])
    assert assessments[2]["auditability_rating"] == 4
    assert math.isnan(assessments[3]["impact_rating"])
    assert store.tables["Proposals"][1]["problem_solution"] == (
        "Every challenge lists measurable KPIs."
    )
    assert "rating_avg" not in assessments[0]


def test_run_spec_batch_pushes_through_sdk() -> None:
    """The SDK should execute run-spec batches against its own store."""
    store = InMemoryStore()
    config = CatalystConfig(supabase_url=None, supabase_key=None)
    client = CatalystClient(config, store=store, source=load_fund9_source())

    output = client.run_spec(str(fixture_path("run_spec/push_and_ping.yaml")))

    assert output[-1] == "Assessments\t5"
    assert "rating_avg" in store.tables["Assessments"][0]
