"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to client operations so different
entry points can execute one declarative batch without drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from core.errors import CatalystRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import optional_bool, optional_int, reject_unknown_fields, required_string
from core.types import PushOptions, PushSummary

_PUSH_FIELDS = {"fund", "force_insert", "derived_fields"}
_PING_FIELDS = {"table"}


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def push(self, options: PushOptions) -> PushSummary: ...

    def ping(self, table: str) -> int: ...


@dataclass(frozen=True)
class RunSpecExecutionContext:
    """In-memory context used to execute run-spec steps."""

    client: RunSpecClient
    default_fund_number: int | None


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines.

    Steps run in file order; the first failing step stops the batch.
    """
    context = RunSpecExecutionContext(
        client=client,
        default_fund_number=spec.defaults.fund_number,
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def render_push_summary(summary: PushSummary) -> tuple[str, ...]:
    """Render a push summary as tab-separated output lines."""
    lines = [f"fund\t{summary.fund_number}\tid={summary.fund_id}"]
    for table, inserted_count in summary.inserted_counts.items():
        lines.append(f"inserted\t{table}\t{inserted_count}")
    for table in summary.skipped_tables:
        lines.append(f"skipped\t{table}")
    lines.append(f"null_proposal_refs\t{summary.null_proposal_refs}")
    return tuple(lines)


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    if step.command == "push":
        return _execute_push_step(context, step)
    if step.command == "ping":
        return (_execute_ping_step(context, step),)
    raise CatalystRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _execute_push_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    reject_unknown_fields(step.args, _PUSH_FIELDS, "push")
    fund_number = optional_int(step.args, "fund")
    if fund_number is None:
        fund_number = context.default_fund_number
    if fund_number is None:
        raise CatalystRunSpecError(
            "Run-spec 'push' step requires 'fund' or defaults.fund to be set."
        )
    options = PushOptions(
        fund_number=fund_number,
        skip_existing=not optional_bool(step.args, "force_insert", False),
        include_derived_fields=optional_bool(step.args, "derived_fields", False),
    )
    return render_push_summary(context.client.push(options))


def _execute_ping_step(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    reject_unknown_fields(step.args, _PING_FIELDS, "ping")
    table = required_string(step.args, "table")
    return f"{table}\t{context.client.ping(table)}"
