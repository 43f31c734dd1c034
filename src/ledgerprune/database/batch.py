"""Chunked identifier deletes."""

import logging
from typing import Iterator, Sequence

from sqlalchemy import Table, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerprune.config import DELETE_BATCH_SIZE

logger = logging.getLogger(__name__)


def chunked(ids: Sequence[int], size: int) -> Iterator[list[int]]:
    """Yield consecutive slices of at most ``size`` identifiers."""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    for start in range(0, len(ids), size):
        yield list(ids[start : start + size])


def delete_by_ids(
    session: Session, table: Table, ids: Sequence[int], batch_size: int = DELETE_BATCH_SIZE
) -> int:
    """Delete rows of ``table`` whose primary key is in ``ids``.

    One parameterized ``DELETE ... WHERE id IN (...)`` is issued per chunk, all
    through the caller's session. Chunks only keep statements under backend
    parameter limits; they are never committed on their own.

    Args:
        session: Session with an open transaction
        table: Table to delete from (must have an ``id`` column)
        ids: Identifiers to delete
        batch_size: Maximum identifiers per statement

    Returns:
        Number of rows the backend reported as deleted

    Raises:
        RuntimeError: If the session has no open transaction
    """
    if not ids:
        return 0
    if not session.in_transaction():
        raise RuntimeError(f"Deleting from {table.name} requires an open transaction")

    deleted = 0
    for batch in chunked(ids, batch_size):
        try:
            result = session.execute(delete(table).where(table.c.id.in_(batch)))
        except SQLAlchemyError as e:
            logger.error("Error deleting %d ids from %s: %s", len(ids), table.name, e)
            e.add_note(f"while deleting {len(ids)} ids from {table.name}")
            raise
        deleted += result.rowcount or 0

    logger.debug("Deleted %d rows from %s in batches of %d", deleted, table.name, batch_size)
    return deleted
