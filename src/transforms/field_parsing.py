"""Scalar field parsing for loosely-typed source records.

This module turns free-text JSON and CSV cells into the integer keys,
ratings, and flags used by the reconciliation transforms.
"""

from __future__ import annotations

import math
import re

from core.constants import CHALLENGE_SETTING_PATTERN, NOT_A_NUMBER

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_CHALLENGE_SETTING_RE = re.compile(CHALLENGE_SETTING_PATTERN)


def parse_leading_int(value: object) -> float:
    """Parse the leading integer of a cell value.

    Surrounding whitespace and an optional sign are accepted, and parsing
    stops at the first non-digit, so ``"4.5"`` and ``"4 stars"`` give 4.

    Args:
        value: Raw cell value.

    Returns:
        Parsed integer, or NaN when no leading digits exist.
    """
    if isinstance(value, bool) or value is None:
        return NOT_A_NUMBER
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return NOT_A_NUMBER if math.isnan(value) or math.isinf(value) else int(value)
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        return NOT_A_NUMBER
    return int(match.group(1))


def is_not_a_number(value: object) -> bool:
    """Return whether a parsed value is the not-a-number sentinel."""
    return isinstance(value, float) and math.isnan(value)


def is_challenge_setting(title: object) -> bool:
    """Return whether a challenge title names a challenge-setting round.

    Non-string titles never match.
    """
    if not isinstance(title, str):
        return False
    return _CHALLENGE_SETTING_RE.search(title) is not None


def optional_text(value: object) -> str | None:
    """Return a cell as text, keeping missing cells as None."""
    if value is None:
        return None
    return str(value)
