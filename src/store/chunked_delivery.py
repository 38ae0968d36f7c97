"""Chunked bulk-insert delivery.

This module splits large insert batches into bounded chunks so no single
request exceeds what the store accepts. Chunks go out strictly in order
and the first failure stops delivery without rolling back earlier chunks.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from core.constants import INSERT_CHUNK_SIZE, INSERT_CHUNK_THRESHOLD
from core.errors import CatalystChunkDeliveryError, CatalystStoreError
from core.logging_config import get_logger
from core.types import RowStore

_LOGGER = get_logger(__name__)


def plan_chunks(
    rows: Sequence[Mapping[str, object]],
    threshold: int = INSERT_CHUNK_THRESHOLD,
    chunk_size: int = INSERT_CHUNK_SIZE,
) -> list[Sequence[Mapping[str, object]]]:
    """Split rows into ordered insert chunks.

    Args:
        rows: Rows to deliver.
        threshold: Largest row count still sent as one request.
        chunk_size: Maximum rows per chunk above the threshold.

    Returns:
        Ordered chunks; empty when there are no rows.
    """
    if not rows:
        return []
    if len(rows) <= threshold:
        return [rows]
    return [rows[start : start + chunk_size] for start in range(0, len(rows), chunk_size)]


def deliver_rows(store: RowStore, table: str, rows: Sequence[Mapping[str, object]]) -> int:
    """Insert rows into a table, chunking oversized batches.

    Args:
        store: Destination row store.
        table: Destination table name.
        rows: Rows to insert, in order.

    Returns:
        Total inserted count reported by the store.

    Raises:
        CatalystChunkDeliveryError: If a chunk of a multi-chunk batch fails.
        CatalystStoreError: If a single-request insert fails.
    """
    chunks = plan_chunks(rows)
    if len(chunks) <= 1:
        return sum(store.insert_rows(table, chunk) for chunk in chunks)
    delivered_count = 0
    for chunk_index, chunk in enumerate(chunks):
        try:
            delivered_count += store.insert_rows(table, chunk)
        except CatalystStoreError as error:
            _LOGGER.error(
                "chunk_delivery_failed",
                table=table,
                chunk_index=chunk_index,
                chunk_count=len(chunks),
                delivered_count=delivered_count,
            )
            raise CatalystChunkDeliveryError(
                f"Insert into {table} failed at chunk {chunk_index + 1} of {len(chunks)} "
                f"after {delivered_count} rows were delivered: {error}",
                table=table,
                chunk_index=chunk_index,
                chunk_count=len(chunks),
                delivered_count=delivered_count,
            ) from error
        _LOGGER.info(
            "chunk_delivered",
            table=table,
            chunk_index=chunk_index,
            chunk_count=len(chunks),
            chunk_rows=len(chunk),
        )
    return delivered_count
