"""Dependent-record resolution domain service."""

import logging
from datetime import date
from typing import Sequence

from ledgerprune.config import LEDGER_ACCOUNT_CLASS
from ledgerprune.database.base import LedgerStore
from ledgerprune.domain.entities import BalanceGroup, PendingDeletion
from ledgerprune.utils.date_parser import parse_cutoff_date

logger = logging.getLogger(__name__)


class DependentRecordResolver:
    """Expands balance groups into the ledger entries, line items and headers they touch."""

    def __init__(self, store: LedgerStore, account_id: int = LEDGER_ACCOUNT_CLASS):
        self.store = store
        self.account_id = account_id

    def resolve_deletion_set(
        self, groups: Sequence[BalanceGroup], cutoff_date: date | str
    ) -> list[PendingDeletion]:
        """Find every ledger entry of ``groups`` dated on or before the cutoff.

        Args:
            groups: Zero-balance groups selected for deletion
            cutoff_date: Inclusive upper bound (date or YYYY-MM-DD string)

        Returns:
            One PendingDeletion per ledger entry, ordered by grouping key and
            entry date. An empty group list yields an empty result.
        """
        cutoff = parse_cutoff_date(cutoff_date)
        if not groups:
            return []

        pending = self.store.pending_deletions([group.key for group in groups], cutoff, self.account_id)
        logger.info(
            "Resolved %d ledger entries across %d groups for deletion", len(pending), len(groups)
        )
        return pending
