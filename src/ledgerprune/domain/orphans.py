"""Orphaned header and exhausted line item detection."""

import logging
from typing import Sequence

from ledgerprune.config import QUANTITY_EPSILON
from ledgerprune.database.base import LedgerStore
from ledgerprune.domain.entities import DocumentHeader

logger = logging.getLogger(__name__)


class OrphanFinder:
    """Finds structural leftovers: headers without line items, empty line items."""

    def __init__(self, store: LedgerStore, epsilon: float = QUANTITY_EPSILON):
        self.store = store
        self.epsilon = epsilon

    def find_orphaned_headers(
        self, excluding_line_item_ids: Sequence[int] = ()
    ) -> list[DocumentHeader]:
        """Return document headers owning no line item, ordered by ID.

        Line items in ``excluding_line_item_ids`` count as deleted.
        """
        headers = self.store.orphaned_headers(excluding_line_item_ids)
        logger.info("Found %d orphaned headers", len(headers))
        return headers

    def find_exhausted_line_items(self) -> list[int]:
        """Return IDs of line items whose stored quantity is at or below epsilon."""
        ids = self.store.exhausted_line_item_ids(self.epsilon)
        logger.info("Found %d line items with zero quantity", len(ids))
        return ids
