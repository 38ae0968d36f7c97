"""Runtime configuration model for catalyst-sb.

This module owns all environment variable and options-file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from core.constants import (
    DEFAULT_ASSESSMENTS_URI,
    DEFAULT_CHALLENGES_URL_TEMPLATE,
    DEFAULT_OPTIONS_FILE_NAME,
    DEFAULT_PROPOSALS_URL_TEMPLATE,
)
from core.errors import CatalystConfigError

_OPTION_KEYS = (
    "CATALYST_SUPABASE_URL",
    "CATALYST_SUPABASE_ANON_KEY",
    "CATALYST_CHALLENGES_URL_TEMPLATE",
    "CATALYST_PROPOSALS_URL_TEMPLATE",
    "CATALYST_ASSESSMENTS_URI",
    "CATALYST_HTTP_TIMEOUT",
    "CATALYST_S3_REGION",
    "CATALYST_S3_PROFILE",
)


@dataclass(frozen=True)
class CatalystConfig:
    """Validated runtime configuration.

    Attributes:
        supabase_url: Base URL of the Supabase project.
        supabase_key: Anon or service key sent as ``apikey`` and bearer token.
        challenges_url_template: Challenges JSON URL with a ``{fund}`` slot.
        proposals_url_template: Proposals JSON URL with a ``{fund}`` slot.
        assessments_uri: Local path, ``s3://`` or ``http(s)://`` CSV location.
        http_timeout: Optional HTTP timeout in seconds, None disables it.
        s3_region: Optional AWS region for S3 assessment sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    supabase_url: str | None
    supabase_key: str | None
    challenges_url_template: str = DEFAULT_CHALLENGES_URL_TEMPLATE
    proposals_url_template: str = DEFAULT_PROPOSALS_URL_TEMPLATE
    assessments_uri: str = DEFAULT_ASSESSMENTS_URI
    http_timeout: float | None = None
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls, options_file: str | None = None) -> "CatalystConfig":
        """Build config from an options file overlaid with environment variables.

        Args:
            options_file: Optional JSON options path. Falls back to
                ``CATALYST_OPTIONS_FILE`` and then ``options.json`` if present.

        Returns:
            A validated config object.

        Raises:
            CatalystConfigError: If the options file or values are invalid.
        """
        values = dict(_load_options_file(options_file))
        for key in _OPTION_KEYS:
            env_value = os.getenv(key)
            if env_value is not None:
                values[key] = env_value
        templates = {
            key: values.get(key, default)
            for key, default in (
                ("CATALYST_CHALLENGES_URL_TEMPLATE", DEFAULT_CHALLENGES_URL_TEMPLATE),
                ("CATALYST_PROPOSALS_URL_TEMPLATE", DEFAULT_PROPOSALS_URL_TEMPLATE),
                ("CATALYST_ASSESSMENTS_URI", DEFAULT_ASSESSMENTS_URI),
            )
        }
        for key, template in templates.items():
            format_fund_template(template, 0, key)
        return cls(
            supabase_url=values.get("CATALYST_SUPABASE_URL"),
            supabase_key=values.get("CATALYST_SUPABASE_ANON_KEY"),
            challenges_url_template=templates["CATALYST_CHALLENGES_URL_TEMPLATE"],
            proposals_url_template=templates["CATALYST_PROPOSALS_URL_TEMPLATE"],
            assessments_uri=templates["CATALYST_ASSESSMENTS_URI"],
            http_timeout=_parse_http_timeout(values.get("CATALYST_HTTP_TIMEOUT")),
            s3_region=values.get("CATALYST_S3_REGION"),
            s3_profile=values.get("CATALYST_S3_PROFILE"),
        )


def _load_options_file(options_file: str | None) -> Mapping[str, str]:
    """Read string options from a JSON file.

    An explicitly requested file must exist; the implicit default is optional.

    Args:
        options_file: Explicit path or None.

    Returns:
        Mapping of option keys to string values.

    Raises:
        CatalystConfigError: If the file is unreadable or not a JSON object.
    """
    explicit_path = options_file or os.getenv("CATALYST_OPTIONS_FILE")
    options_path = Path(explicit_path or DEFAULT_OPTIONS_FILE_NAME).expanduser()
    if not options_path.exists():
        if explicit_path:
            raise CatalystConfigError(
                f"Options file {options_path} does not exist. "
                "Provide an existing JSON file or unset CATALYST_OPTIONS_FILE."
            )
        return {}
    try:
        payload = json.loads(options_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        raise CatalystConfigError(
            f"Failed to read options file {options_path}: {error}. Fix the JSON and retry."
        ) from error
    if not isinstance(payload, dict):
        raise CatalystConfigError(
            f"Invalid options file {options_path}: expected a JSON object of string values."
        )
    return {str(key): str(value) for key, value in payload.items() if value is not None}


def _parse_http_timeout(raw_value: str | None) -> float | None:
    """Parse the HTTP timeout value.

    Args:
        raw_value: Raw string from environment or options file.

    Returns:
        Timeout in seconds, or None when unset or empty.

    Raises:
        CatalystConfigError: If value is not a positive number.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise CatalystConfigError(
            "Invalid CATALYST_HTTP_TIMEOUT value: "
            f"expected seconds as a number, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise CatalystConfigError(
            f"Invalid CATALYST_HTTP_TIMEOUT value {raw_value}: must be greater than zero."
        )
    return timeout


def format_fund_template(template: str, fund_number: int, option_name: str) -> str:
    """Fill the ``{fund}`` slot of a source location template.

    Args:
        template: URL or path with an optional ``{fund}`` placeholder.
        fund_number: Fund number to substitute.
        option_name: Config key the template came from, for error messages.

    Returns:
        The formatted location.

    Raises:
        CatalystConfigError: If the template has other placeholders or bad braces.
    """
    try:
        return template.format(fund=fund_number)
    except (KeyError, IndexError, ValueError) as error:
        raise CatalystConfigError(
            f"Invalid {option_name} template '{template}': {error!r}. "
            "Use '{fund}' as the only placeholder and double literal braces."
        ) from error
