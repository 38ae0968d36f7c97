"""Supabase REST gateway for Catalyst tables.

This module wraps the PostgREST endpoints of a Supabase project with
filtered selects and bulk inserts, mapping every failure onto
``CatalystStoreError`` with table context.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, Sequence

import httpx

from core.config import CatalystConfig
from core.constants import SUPABASE_REST_PATH
from core.errors import CatalystConfigError, CatalystStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class SupabaseGateway:
    """Relational store gateway backed by the Supabase REST API."""

    def __init__(self, config: CatalystConfig, client: httpx.Client | None = None) -> None:
        """Create the gateway.

        Args:
            config: Runtime configuration with Supabase URL and key.
            client: Optional preconfigured HTTP client, mainly for tests.

        Raises:
            CatalystConfigError: If the Supabase URL or key is missing.
        """
        if not config.supabase_url or not config.supabase_key:
            raise CatalystConfigError(
                "Supabase access requires CATALYST_SUPABASE_URL and "
                "CATALYST_SUPABASE_ANON_KEY. Set them in the environment or options.json."
            )
        self._base_url = config.supabase_url.rstrip("/") + SUPABASE_REST_PATH
        self._headers = {
            "apikey": config.supabase_key,
            "Authorization": f"Bearer {config.supabase_key}",
        }
        self._client = client or httpx.Client(timeout=config.http_timeout)

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    def select_rows(
        self,
        table: str,
        filters: Mapping[str, object] | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """Select rows from a table with optional equality filters.

        Args:
            table: Table name.
            filters: Column constraints; a list or tuple value matches any member,
                any other value matches by equality.
            columns: PostgREST select list.

        Returns:
            Matching rows, possibly empty.

        Raises:
            CatalystStoreError: If the request fails or is rejected.
        """
        params = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = _filter_param(value)
        response = self._send("GET", table, params=params)
        return _expect_row_list(table, response)

    def insert_rows(self, table: str, rows: Sequence[Mapping[str, object]]) -> int:
        """Insert rows in a single request.

        Args:
            table: Table name.
            rows: Column mappings to insert.

        Returns:
            Number of rows the store reports as inserted.

        Raises:
            CatalystStoreError: If the request fails or violates a constraint.
        """
        body = encode_rows(rows)
        response = self._send(
            "POST",
            table,
            content=body,
            headers={"Content-Type": "application/json", "Prefer": "return=representation"},
        )
        inserted_count = len(_expect_row_list(table, response))
        _LOGGER.info("rows_inserted", table=table, inserted_count=inserted_count)
        return inserted_count

    def _send(
        self,
        method: str,
        table: str,
        params: Mapping[str, str] | None = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}/{table}"
        try:
            response = self._client.request(
                method,
                url,
                params=params,
                content=content,
                headers={**self._headers, **(headers or {})},
            )
        except httpx.HTTPError as error:
            raise CatalystStoreError(
                f"Failed to reach Supabase table {table}: {error}. "
                "Check network access and the Supabase URL."
            ) from error
        if response.status_code >= 400:
            _LOGGER.error(
                "store_request_rejected",
                table=table,
                method=method,
                status_code=response.status_code,
            )
            raise CatalystStoreError(
                f"Supabase rejected {method} on table {table} "
                f"(HTTP {response.status_code}): {response.text}"
            )
        return response


def encode_rows(rows: Sequence[Mapping[str, object]]) -> bytes:
    """Serialize rows to a JSON array, writing NaN values as null.

    Args:
        rows: Column mappings to serialize.

    Returns:
        UTF-8 JSON payload.
    """
    payload = [{column: _json_value(value) for column, value in row.items()} for row in rows]
    return json.dumps(payload, allow_nan=False).encode("utf-8")


def _filter_param(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return "in.(" + ",".join(_quote_filter_value(item) for item in value) + ")"
    return f"eq.{value}"


def _quote_filter_value(value: object) -> str:
    """Quote a list member so commas and parentheses stay inside the value."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _json_value(value: object) -> object:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _expect_row_list(table: str, response: httpx.Response) -> list[dict[str, Any]]:
    try:
        payload = response.json()
    except ValueError as error:
        raise CatalystStoreError(
            f"Supabase returned a non-JSON response for table {table}: {error}."
        ) from error
    if not isinstance(payload, list):
        raise CatalystStoreError(
            f"Supabase returned an unexpected payload for table {table}: "
            f"expected a list of rows, got {type(payload).__name__}."
        )
    return payload
