"""Remote source adapter for Catalyst fund data.

This module fetches challenge and proposal JSON documents from the
voter-tool repository and assessment rows from the configured CSV.
"""

from __future__ import annotations

from typing import Any

import httpx

from core.config import CatalystConfig, format_fund_template
from core.errors import CatalystFetchError
from core.logging_config import get_logger
from ingest.assessment_reader import read_assessment_rows

_LOGGER = get_logger(__name__)


class RemoteSourceAdapter:
    """Fetches raw, untyped fund records from configured locations."""

    def __init__(self, config: CatalystConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = client or httpx.Client(timeout=config.http_timeout, follow_redirects=True)

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    def fetch_challenges(self, fund_number: int) -> list[dict[str, Any]]:
        """Fetch raw challenge records for a fund."""
        url = format_fund_template(
            self._config.challenges_url_template, fund_number, "CATALYST_CHALLENGES_URL_TEMPLATE"
        )
        return self._fetch_json_records(url, "challenges")

    def fetch_proposals(self, fund_number: int) -> list[dict[str, Any]]:
        """Fetch raw proposal records for a fund."""
        url = format_fund_template(
            self._config.proposals_url_template, fund_number, "CATALYST_PROPOSALS_URL_TEMPLATE"
        )
        return self._fetch_json_records(url, "proposals")

    def fetch_assessments(self, fund_number: int) -> list[dict[str, Any]]:
        """Read raw assessment CSV rows for a fund."""
        source_uri = format_fund_template(
            self._config.assessments_uri, fund_number, "CATALYST_ASSESSMENTS_URI"
        )
        _LOGGER.info("source_fetch_started", dataset="assessments", source_uri=source_uri)
        rows: list[dict[str, Any]] = list(
            read_assessment_rows(source_uri, self._config, self._client)
        )
        _LOGGER.info("source_fetched", dataset="assessments", record_count=len(rows))
        return rows

    def _fetch_json_records(self, url: str, dataset: str) -> list[dict[str, Any]]:
        """Download a JSON array of objects.

        Args:
            url: Document URL.
            dataset: Dataset label for logs and errors.

        Returns:
            Decoded records.

        Raises:
            CatalystFetchError: If the request fails or the payload is not a list of objects.
        """
        _LOGGER.info("source_fetch_started", dataset=dataset, url=url)
        try:
            response = self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as error:
            raise CatalystFetchError(
                f"Failed to fetch {dataset} from {url}: {error}. "
                "Check the fund number and repository URL."
            ) from error
        except ValueError as error:
            raise CatalystFetchError(
                f"Failed to decode {dataset} JSON from {url}: {error}."
            ) from error
        if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
            raise CatalystFetchError(
                f"Unexpected {dataset} payload from {url}: expected a JSON list of objects."
            )
        _LOGGER.info("source_fetched", dataset=dataset, record_count=len(payload))
        return payload
