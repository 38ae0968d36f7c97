"""Unit tests for core config parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import CatalystConfig
from core.constants import DEFAULT_ASSESSMENTS_URI, DEFAULT_CHALLENGES_URL_TEMPLATE
from core.errors import CatalystConfigError
from tests.fixture_paths import fixture_path


def test_from_env_reads_supabase_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve Supabase settings from environment."""
    monkeypatch.setenv("CATALYST_SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("CATALYST_SUPABASE_ANON_KEY", "env-key")

    config = CatalystConfig.from_env()

    assert (config.supabase_url, config.supabase_key) == ("https://env.supabase.co", "env-key")
    assert config.challenges_url_template == DEFAULT_CHALLENGES_URL_TEMPLATE
    assert config.assessments_uri == DEFAULT_ASSESSMENTS_URI
    assert config.http_timeout is None


def test_from_env_overlays_environment_on_options_file(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment values should win over options-file values."""
    monkeypatch.setenv("CATALYST_SUPABASE_ANON_KEY", "env-key")

    config = CatalystConfig.from_env(str(fixture_path("options.json")))

    assert config.supabase_url == "https://example.supabase.co"
    assert config.supabase_key == "env-key"


def test_from_env_reads_default_options_file_in_working_directory(tmp_path: Path) -> None:
    """An options.json in the working directory should be picked up implicitly."""
    (tmp_path / "options.json").write_text(
        '{"CATALYST_SUPABASE_URL": "https://cwd.supabase.co", "CATALYST_HTTP_TIMEOUT": "2.5"}',
        encoding="utf-8",
    )

    config = CatalystConfig.from_env()

    assert config.supabase_url == "https://cwd.supabase.co" and config.http_timeout == 2.5


def test_from_env_raises_for_missing_explicit_options_file(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A requested options file that does not exist should fail."""
    monkeypatch.setenv("CATALYST_OPTIONS_FILE", "missing-options.json")

    with pytest.raises(CatalystConfigError, match="does not exist"):
        CatalystConfig.from_env()


def test_from_env_raises_for_non_object_options_file(tmp_path: Path) -> None:
    """Options files must hold a JSON object."""
    options_path = tmp_path / "list-options.json"
    options_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(CatalystConfigError, match="JSON object"):
        CatalystConfig.from_env(str(options_path))


@pytest.mark.parametrize("raw_timeout", ["soon", "0", "-3"])
def test_from_env_raises_for_invalid_timeout(
    monkeypatch: pytest.MonkeyPatch,
    raw_timeout: str,
) -> None:
    """Config should fail for non-numeric or non-positive timeouts."""
    monkeypatch.setenv("CATALYST_HTTP_TIMEOUT", raw_timeout)

    with pytest.raises(CatalystConfigError, match="CATALYST_HTTP_TIMEOUT"):
        CatalystConfig.from_env()


@pytest.mark.parametrize(
    ("key", "template"),
    [
        ("CATALYST_CHALLENGES_URL_TEMPLATE", "https://data.example.org/f{fund_number}/c.json"),
        ("CATALYST_PROPOSALS_URL_TEMPLATE", "https://data.example.org/f{}/p.json"),
        ("CATALYST_ASSESSMENTS_URI", "data/f{fund/assessments.csv"),
    ],
)
def test_from_env_raises_for_invalid_location_template(
    monkeypatch: pytest.MonkeyPatch,
    key: str,
    template: str,
) -> None:
    """Templates with unknown placeholders or broken braces should fail at load time."""
    monkeypatch.setenv(key, template)

    with pytest.raises(CatalystConfigError, match=key):
        CatalystConfig.from_env()


def test_from_env_accepts_escaped_braces_in_template(monkeypatch: pytest.MonkeyPatch) -> None:
    """Doubled braces are literal and should pass validation."""
    monkeypatch.setenv("CATALYST_ASSESSMENTS_URI", "data/{{raw}}/f{fund}.csv")

    config = CatalystConfig.from_env()

    assert config.assessments_uri.format(fund=9) == "data/{raw}/f9.csv"
