"""Business-key lookup index for foreign-key resolution.

This module replaces positional "first match" lookups with an explicit
index whose callers choose between optional and required resolution.
"""

from __future__ import annotations

from typing import Callable, Generic, Hashable, Iterable, TypeVar

from core.errors import CatalystUnresolvedReferenceError
from transforms.field_parsing import is_not_a_number

RecordT = TypeVar("RecordT")


class KeyIndex(Generic[RecordT]):
    """Exact-equality index from one business key to a stored record.

    The first record wins when several share a key. ``None``, NaN and blank
    string keys are never indexed and never match.
    """

    def __init__(
        self,
        records: Iterable[RecordT],
        key_of: Callable[[RecordT], Hashable],
        entity_name: str,
    ) -> None:
        self._entity_name = entity_name
        self._records: dict[Hashable, RecordT] = {}
        for record in records:
            key = key_of(record)
            if _is_unmatchable(key):
                continue
            self._records.setdefault(key, record)

    def __len__(self) -> int:
        return len(self._records)

    def find(self, key: Hashable) -> RecordT | None:
        """Return the record for a key, or None when absent."""
        if _is_unmatchable(key):
            return None
        return self._records.get(key)

    def require(self, key: Hashable, context: str) -> RecordT:
        """Return the record for a key or fail the reconciliation.

        Args:
            key: Business key to resolve.
            context: Description of the referencing source record.

        Returns:
            Matching stored record.

        Raises:
            CatalystUnresolvedReferenceError: If no record matches.
        """
        record = self.find(key)
        if record is None:
            raise CatalystUnresolvedReferenceError(
                f"Unresolved {self._entity_name} reference {key!r} for {context}: "
                f"no {self._entity_name} with that key exists in the store. "
                "Push the referenced rows first or fix the source data."
            )
        return record


def _is_unmatchable(key: object) -> bool:
    if isinstance(key, str):
        return not key.strip()
    return key is None or is_not_a_number(key)
