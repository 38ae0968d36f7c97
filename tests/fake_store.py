"""In-memory collaborators standing in for Supabase and remote sources."""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Mapping, Sequence

from core.errors import CatalystStoreError
from ingest.assessment_reader import parse_assessment_csv
from tests.fixture_paths import fixture_path


class InMemoryStore:
    """Row store assigning sequential ids per table, like a serial primary key."""

    def __init__(self, fail_on_insert_call: int | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.insert_calls: list[tuple[str, int]] = []
        self.select_calls: list[tuple[str, dict[str, object]]] = []
        self._fail_on_insert_call = fail_on_insert_call
        self._next_ids: dict[str, int] = defaultdict(lambda: 1)

    def select_rows(
        self,
        table: str,
        filters: Mapping[str, object] | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        self.select_calls.append((table, dict(filters or {})))
        rows = [
            row
            for row in self.tables[table]
            if all(_matches(row.get(column), value) for column, value in (filters or {}).items())
        ]
        if columns == "*":
            return [dict(row) for row in rows]
        names = [name.strip() for name in columns.split(",")]
        return [{name: row.get(name) for name in names} for row in rows]

    def insert_rows(self, table: str, rows: Sequence[Mapping[str, object]]) -> int:
        self.insert_calls.append((table, len(rows)))
        if self._fail_on_insert_call == len(self.insert_calls):
            raise CatalystStoreError(f"Simulated rejection on table {table}")
        for row in rows:
            stored_row = dict(row)
            stored_row["id"] = self._next_ids[table]
            self._next_ids[table] += 1
            self.tables[table].append(stored_row)
        return len(rows)

    def seed(self, table: str, rows: Sequence[Mapping[str, object]]) -> None:
        """Store rows without recording an insert call."""
        for row in rows:
            stored_row = dict(row)
            stored_row.setdefault("id", self._next_ids[table])
            self._next_ids[table] = max(self._next_ids[table], int(stored_row["id"])) + 1
            self.tables[table].append(stored_row)


def _matches(stored: object, wanted: object) -> bool:
    if isinstance(wanted, (list, tuple)):
        return stored in wanted
    return stored == wanted


class StaticSource:
    """Record source returning fixed payloads and counting fetches."""

    def __init__(
        self,
        challenges: list[dict[str, Any]],
        proposals: list[dict[str, Any]],
        assessments: list[dict[str, Any]],
    ) -> None:
        self._challenges = challenges
        self._proposals = proposals
        self._assessments = assessments
        self.fetch_counts: dict[str, int] = defaultdict(int)

    def fetch_challenges(self, fund_number: int) -> list[dict[str, Any]]:
        self.fetch_counts["challenges"] += 1
        return list(self._challenges)

    def fetch_proposals(self, fund_number: int) -> list[dict[str, Any]]:
        self.fetch_counts["proposals"] += 1
        return list(self._proposals)

    def fetch_assessments(self, fund_number: int) -> list[dict[str, Any]]:
        self.fetch_counts["assessments"] += 1
        return list(self._assessments)


def load_fund9_source() -> StaticSource:
    """Build a static source from the fund 9 fixture files."""
    csv_path = fixture_path("fund9/assessments.csv")
    return StaticSource(
        challenges=_load_json(fixture_path("fund9/challenges.json")),
        proposals=_load_json(fixture_path("fund9/proposals.json")),
        assessments=parse_assessment_csv(csv_path.read_text(encoding="utf-8"), str(csv_path)),
    )


def _load_json(path: Path) -> list[dict[str, Any]]:
    return json.loads(path.read_text(encoding="utf-8"))
