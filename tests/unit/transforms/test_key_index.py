"""Unit tests for business-key lookup index."""

from __future__ import annotations

import math

import pytest

from core.errors import CatalystUnresolvedReferenceError
from core.types import StoredChallenge
from transforms.key_index import KeyIndex


def _challenge_index() -> KeyIndex[StoredChallenge]:
    challenges = [
        StoredChallenge(id=10, internal_id=1),
        StoredChallenge(id=11, internal_id=2),
        StoredChallenge(id=12, internal_id=1),
    ]
    return KeyIndex(challenges, lambda challenge: challenge.internal_id, "challenge")


def test_find_returns_first_record_for_duplicate_keys() -> None:
    """The first stored record should win for a repeated key."""
    index = _challenge_index()

    match = index.find(1)

    assert match is not None and match.id == 10 and len(index) == 2


def test_find_returns_none_for_absent_and_nan_keys() -> None:
    """Absent, None and NaN keys should resolve to None."""
    index = _challenge_index()

    assert index.find(3) is None and index.find(None) is None and index.find(math.nan) is None


def test_require_raises_unresolved_reference_with_context() -> None:
    """Required lookups should fail with the referencing record in the message."""
    index = _challenge_index()

    with pytest.raises(CatalystUnresolvedReferenceError, match="proposal 7"):
        index.require(3, "proposal 7")


def test_find_ignores_blank_string_keys() -> None:
    """Blank string keys should neither be indexed nor match."""
    index = KeyIndex(["", " ", "z_a"], lambda anon_id: anon_id, "assessor")

    assert len(index) == 1 and index.find("") is None and index.find("z_a") == "z_a"
