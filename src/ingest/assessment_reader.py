"""Assessment CSV readers.

This module loads assessment rows from a local file, an S3 object,
or an HTTP URL and parses them as header-keyed CSV records.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any

import httpx

from core.config import CatalystConfig
from core.errors import CatalystDependencyError, CatalystFetchError
from core.s3_uri import parse_s3_uri


def read_assessment_rows(
    source_uri: str,
    config: CatalystConfig,
    http_client: httpx.Client,
) -> list[dict[str, str]]:
    """Load assessment rows from a CSV location.

    Args:
        source_uri: Local path, ``s3://`` URI, or ``http(s)://`` URL.
        config: Runtime configuration for S3 session defaults.
        http_client: Shared HTTP client for URL sources.

    Returns:
        CSV rows keyed by header column, in file order.

    Raises:
        CatalystFetchError: If the source cannot be read or parsed.
    """
    if source_uri.startswith("s3://"):
        text = _read_s3_text(source_uri, config)
    elif source_uri.startswith(("http://", "https://")):
        text = _read_http_text(source_uri, http_client)
    else:
        text = _read_local_text(Path(source_uri).expanduser())
    return parse_assessment_csv(text, source_uri)


def parse_assessment_csv(text: str, source_uri: str) -> list[dict[str, str]]:
    """Parse CSV text with a header row into row mappings.

    Args:
        text: CSV document text.
        source_uri: Source location for error messages.

    Returns:
        Parsed rows. Blank lines are skipped.

    Raises:
        CatalystFetchError: If the CSV has no header or is malformed.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    try:
        rows = [dict(row) for row in reader]
    except csv.Error as error:
        raise CatalystFetchError(
            f"Failed to parse assessments CSV at {source_uri}: {error}. "
            "Fix the CSV quoting and retry."
        ) from error
    if not reader.fieldnames:
        raise CatalystFetchError(
            f"Assessments CSV at {source_uri} has no header row. "
            "Export the sheet with column names in the first row."
        )
    return rows


def _read_local_text(source_path: Path) -> str:
    if not source_path.is_file():
        raise CatalystFetchError(
            f"Failed to read assessments at {source_path}: file does not exist. "
            "Set CATALYST_ASSESSMENTS_URI to an existing CSV file."
        )
    try:
        return source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise CatalystFetchError(
            f"Failed to read assessments at {source_path}: {error}."
        ) from error


def _read_http_text(url: str, http_client: httpx.Client) -> str:
    try:
        response = http_client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as error:
        raise CatalystFetchError(f"Failed to download assessments from {url}: {error}.") from error
    return response.text


def _read_s3_text(source_uri: str, config: CatalystConfig) -> str:
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    try:
        body = s3_client.get_object(Bucket=location.bucket, Key=location.key)["Body"].read()
    except Exception as error:
        raise CatalystFetchError(
            f"Failed to download assessments from {source_uri}: {error}. "
            "Check AWS credentials and the object key."
        ) from error
    return body.decode("utf-8")


def _create_s3_client(config: CatalystConfig) -> Any:
    """Create a boto3 S3 client.

    Raises:
        CatalystDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise CatalystDependencyError(
            "S3 assessment sources require boto3, but it is not installed. "
            "Install boto3 to read s3:// assessment files."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")
