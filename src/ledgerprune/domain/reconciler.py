"""Line item quantity reconciliation."""

import logging
from typing import Sequence

from ledgerprune.config import QUANTITY_EPSILON
from ledgerprune.database.base import LedgerStore
from ledgerprune.domain.entities import LineItemUpdate, PendingDeletion, ReconcilePlan
from ledgerprune.domain.errors import NotFoundError, ledger_entry_not_found, line_item_not_found

logger = logging.getLogger(__name__)


class QuantityReconciler:
    """Decides, per line item, between a quantity reduction and a deletion.

    All reads go through the store as it is at call time; when called inside
    a pass transaction they observe that transaction's view of the rows.
    """

    def __init__(self, store: LedgerStore, epsilon: float = QUANTITY_EPSILON):
        self.store = store
        self.epsilon = epsilon

    def accumulate_reductions(self, pending: Sequence[PendingDeletion]) -> dict[int, float]:
        """Sum the signed contribution of pending ledger entries per line item.

        Raises:
            NotFoundError: If a ledger entry no longer exists
        """
        reductions: dict[int, float] = {}
        seen: set[int] = set()
        for record in pending:
            if record.ledger_entry_id in seen:
                continue
            seen.add(record.ledger_entry_id)

            contribution = self.store.get_ledger_contribution(record.ledger_entry_id)
            if contribution is None:
                logger.error("Ledger entry %d vanished before reconciliation", record.ledger_entry_id)
                raise NotFoundError(ledger_entry_not_found(record.ledger_entry_id))
            reductions[record.line_item_id] = reductions.get(record.line_item_id, 0.0) + contribution
        return reductions

    def reconcile(self, pending: Sequence[PendingDeletion]) -> ReconcilePlan:
        """Compute line item updates and deletions for a set of pending deletions.

        Each line item is reduced by the magnitude of the summed signed
        contributions of its pending ledger entries, read fresh from the store.

        Args:
            pending: Ledger entries selected for removal

        Returns:
            ReconcilePlan listing the ledger entries to delete, the line items
            to delete (remaining quantity at or below epsilon) and the line
            items to update, both in ascending line item order

        Raises:
            NotFoundError: If a ledger entry or line item no longer exists
        """
        if not pending:
            return ReconcilePlan()

        reductions = self.accumulate_reductions(pending)

        to_delete: list[int] = []
        to_update: list[LineItemUpdate] = []
        for line_item_id in sorted(reductions):
            # Purchase lines accumulate a positive sum, sale lines a negative
            # one; either way the line item only ever shrinks.
            reduction = abs(reductions[line_item_id])
            current = self.store.get_line_item_quantity(line_item_id)
            if current is None:
                raise NotFoundError(line_item_not_found(line_item_id))

            new_quantity = current - reduction
            logger.debug(
                "Line item %d: current_qty=%.3f, reduced_by=%.3f, new_qty=%.3f",
                line_item_id,
                current,
                reduction,
                new_quantity,
            )
            if new_quantity <= self.epsilon:
                to_delete.append(line_item_id)
            else:
                to_update.append(
                    LineItemUpdate(
                        line_item_id=line_item_id,
                        current_quantity=current,
                        reduction=reduction,
                        new_quantity=new_quantity,
                    )
                )

        ledger_entry_ids = tuple(dict.fromkeys(record.ledger_entry_id for record in pending))
        return ReconcilePlan(
            ledger_entry_ids=ledger_entry_ids,
            to_delete_line_items=tuple(to_delete),
            to_update_line_items=tuple(to_update),
        )
