"""Balance aggregation domain service."""

import logging
from datetime import date

from ledgerprune.config import LEDGER_ACCOUNT_CLASS, POSITIVE_BALANCE_PREVIEW
from ledgerprune.database.base import LedgerStore
from ledgerprune.domain.entities import BalanceGroup, PositiveBalanceReport
from ledgerprune.utils.date_parser import parse_cutoff_date

logger = logging.getLogger(__name__)


class BalanceAggregator:
    """Service computing net balances per grouping key. Read only."""

    def __init__(self, store: LedgerStore, account_id: int = LEDGER_ACCOUNT_CLASS):
        """Initialize balance aggregator.

        Args:
            store: Ledger store instance
            account_id: Account class whose entries are aggregated
        """
        self.store = store
        self.account_id = account_id

    def find_zero_balance_groups(self, cutoff_date: date | str) -> list[BalanceGroup]:
        """Find groups whose net balance is exactly zero as of the cutoff.

        Only entries with a document group and dated on or before the cutoff
        are summed. The comparison to zero is strict.

        Args:
            cutoff_date: Inclusive upper bound (date or YYYY-MM-DD string)

        Returns:
            Balance groups ordered by grouping key

        Raises:
            ValidationError: If the cutoff date is malformed
        """
        cutoff = parse_cutoff_date(cutoff_date)
        # TODO: compare against a tolerance once upstream stores quantities as
        # DECIMAL; float sums such as 0.1 + 0.2 - 0.3 currently miss the match.
        groups = self.store.zero_balance_groups(cutoff, self.account_id)
        logger.info("Found %d groups with zero balance on or before %s", len(groups), cutoff)
        return groups

    def find_positive_balance_groups(
        self, limit: int = POSITIVE_BALANCE_PREVIEW
    ) -> PositiveBalanceReport:
        """Report groups still carrying a positive balance (no cutoff).

        Args:
            limit: Maximum number of groups returned, first by grouping key

        Returns:
            PositiveBalanceReport with the preview and the total group count
        """
        groups = self.store.positive_balance_groups(self.account_id, limit)
        total = self.store.count_positive_balance_groups(self.account_id)
        logger.info("Groups with positive balance: %d", total)
        return PositiveBalanceReport(groups=tuple(groups), total_count=total)
