"""Catalyst push exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class CatalystError(Exception):
    """Base exception for all catalyst-sb failures."""


class CatalystConfigError(CatalystError):
    """Raised for invalid runtime configuration."""


class CatalystFetchError(CatalystError):
    """Raised when a remote or local source cannot be fetched or parsed."""


class CatalystStoreError(CatalystError):
    """Raised when the relational store rejects a select or insert."""


class CatalystChunkDeliveryError(CatalystStoreError):
    """Raised when one chunk of a multi-chunk insert fails.

    Attributes:
        table: Destination table name.
        chunk_index: Zero-based index of the failed chunk.
        chunk_count: Total number of chunks planned for the table.
        delivered_count: Rows inserted by earlier chunks before the failure.
    """

    def __init__(
        self,
        message: str,
        table: str,
        chunk_index: int,
        chunk_count: int,
        delivered_count: int,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.chunk_index = chunk_index
        self.chunk_count = chunk_count
        self.delivered_count = delivered_count


class CatalystNotFoundError(CatalystError):
    """Raised when required rows are absent from the store."""


class CatalystUnresolvedReferenceError(CatalystError):
    """Raised when a required business-key join finds no matching row."""


class CatalystDependencyError(CatalystError):
    """Raised when an optional runtime dependency is missing."""


class CatalystRunSpecError(CatalystError):
    """Raised for invalid or unsupported run-spec configuration."""
