"""Unit tests for scalar field parsing."""

from __future__ import annotations

import math

import pytest

from transforms.field_parsing import (
    is_challenge_setting,
    is_not_a_number,
    optional_text,
    parse_leading_int,
)


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [("4", 4), (" 4 ", 4), ("4.5", 4), ("4 stars", 4), ("-2", -2), (7, 7), (3.9, 3)],
)
def test_parse_leading_int_reads_leading_digits(raw_value: object, expected: int) -> None:
    """Leading integer parsing should stop at the first non-digit."""
    assert parse_leading_int(raw_value) == expected


@pytest.mark.parametrize("raw_value", ["", "   ", "n/a", "stars 4", None, True, math.nan])
def test_parse_leading_int_returns_nan_without_digits(raw_value: object) -> None:
    """Cells without a leading number should give the NaN sentinel."""
    assert math.isnan(parse_leading_int(raw_value))


def test_is_not_a_number_only_matches_nan() -> None:
    """Only NaN floats should count as the not-a-number sentinel."""
    assert is_not_a_number(math.nan) and not is_not_a_number(0) and not is_not_a_number(None)


def test_is_challenge_setting_matches_fund_phrase() -> None:
    """Challenge-setting titles should be detected with or without spacing."""
    assert is_challenge_setting("Fund9 Challenge Setting: Open Source")
    assert is_challenge_setting("Fund10 challenge setting")
    assert is_challenge_setting("Catalyst Fund challengeSetting")


def test_is_challenge_setting_rejects_regular_titles() -> None:
    """Ordinary and non-string titles should not be flagged."""
    assert not is_challenge_setting("Developer Ecosystem")
    assert not is_challenge_setting(None)
    assert not is_challenge_setting(42)


def test_optional_text_keeps_missing_cells_as_none() -> None:
    """Missing cells should stay None while present values become text."""
    assert optional_text(None) is None and optional_text(5) == "5" and optional_text("") == ""
