"""Cleanup pass orchestration.

A pass plans its work with read-only queries, then applies every mutation in
a single store transaction: either the whole pass commits or nothing does.
In dry-run mode the identical plan is computed and handed to a reporter
instead, and nothing is written.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from ledgerprune.config import CleanupConfig
from ledgerprune.database.base import LedgerStore
from ledgerprune.domain.balance import BalanceAggregator
from ledgerprune.domain.entities import (
    BalanceGroup,
    CleanupSummary,
    DeletionStats,
    DocumentHeader,
    PendingDeletion,
    PositiveBalanceReport,
    ReconcilePlan,
    ZeroBalancePlan,
)
from ledgerprune.domain.orphans import OrphanFinder
from ledgerprune.domain.reconciler import QuantityReconciler
from ledgerprune.domain.resolver import DependentRecordResolver
from ledgerprune.utils.date_parser import parse_cutoff_date

logger = logging.getLogger(__name__)


def calculate_stats(pending: Sequence[PendingDeletion]) -> DeletionStats:
    """Count distinct ledger entries, line items and headers in a pending set."""
    return DeletionStats(
        ledger_entries=len({record.ledger_entry_id for record in pending}),
        line_items=len({record.line_item_id for record in pending}),
        headers=len({record.header_id for record in pending}),
    )


class CleanupReporter:
    """Receives dry-run plans. The base implementation ignores them."""

    def report_zero_balance_plan(self, plan: ZeroBalancePlan) -> None:
        pass

    def report_orphaned_headers(self, headers: Sequence[DocumentHeader]) -> None:
        pass

    def report_exhausted_line_items(self, line_item_ids: Sequence[int]) -> None:
        pass


class CleanupService:
    """Service running zero-balance, orphan and zero-quantity cleanup passes."""

    def __init__(
        self,
        store: LedgerStore,
        config: CleanupConfig,
        reporter: Optional[CleanupReporter] = None,
    ):
        """Initialize cleanup service.

        Args:
            store: Ledger store instance
            config: Cleanup configuration (cutoff default, dry-run flag)
            reporter: Receiver for dry-run plans
        """
        self.store = store
        self.config = config
        self.reporter = reporter or CleanupReporter()
        self.aggregator = BalanceAggregator(store)
        self.resolver = DependentRecordResolver(store)
        self.reconciler = QuantityReconciler(store)
        self.orphans = OrphanFinder(store)

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def _cutoff(self, cutoff_date: date | str | None) -> date:
        return parse_cutoff_date(self.config.cutoff_date if cutoff_date is None else cutoff_date)

    def _select_zero_balance(
        self, cutoff: date
    ) -> tuple[tuple[BalanceGroup, ...], tuple[PendingDeletion, ...]]:
        groups = self.aggregator.find_zero_balance_groups(cutoff)
        if not groups:
            return (), ()
        pending = self.resolver.resolve_deletion_set(groups, cutoff)
        stats = calculate_stats(pending)
        logger.info(
            "Records to process: %d ledger entries, %d line items, %d headers",
            stats.ledger_entries,
            stats.line_items,
            stats.headers,
        )
        return tuple(groups), tuple(pending)

    def plan_zero_balance_pass(self, cutoff_date: date | str | None = None) -> ZeroBalancePlan:
        """Compute, without writing, everything a zero-balance pass would do.

        Args:
            cutoff_date: Inclusive cutoff; defaults to the configured one

        Returns:
            ZeroBalancePlan with groups, pending deletions and reconcile plan

        Raises:
            ValidationError: If the cutoff date is malformed
        """
        cutoff = self._cutoff(cutoff_date)
        groups, pending = self._select_zero_balance(cutoff)
        return ZeroBalancePlan(
            cutoff_date=cutoff,
            groups=groups,
            pending=pending,
            reconcile=self.reconciler.reconcile(pending),
        )

    def _apply_reconcile_plan(self, plan: ReconcilePlan) -> None:
        logger.info("Deleting %d ledger entries", len(plan.ledger_entry_ids))
        logger.debug("Ledger entry ids: %s", list(plan.ledger_entry_ids))
        self.store.delete_ledger_entries(plan.ledger_entry_ids)

        if plan.to_delete_line_items:
            logger.info("Deleting %d line items with zero quantity", len(plan.to_delete_line_items))
            logger.debug("Line item ids: %s", list(plan.to_delete_line_items))
            self.store.delete_line_items(plan.to_delete_line_items)

        for item in plan.to_update_line_items:
            self.store.update_line_item_quantity(item.line_item_id, item.new_quantity)
        if plan.to_update_line_items:
            logger.info("Updated %d line items with reduced quantities", len(plan.to_update_line_items))

    @staticmethod
    def _summarize(plan: ReconcilePlan, dry_run: bool) -> CleanupSummary:
        return CleanupSummary(
            ledger_entries_affected=len(plan.ledger_entry_ids),
            line_items_updated=len(plan.to_update_line_items),
            line_items_deleted=len(plan.to_delete_line_items),
            dry_run=dry_run,
            deleted_line_item_ids=plan.to_delete_line_items,
        )

    def run_zero_balance_pass(self, cutoff_date: date | str | None = None) -> CleanupSummary:
        """Delete zero-balance ledger entries and shrink or delete their line items.

        Args:
            cutoff_date: Inclusive cutoff; defaults to the configured one

        Returns:
            CleanupSummary of the applied (or, for a dry run, planned) changes

        Raises:
            ValidationError: If the cutoff date is malformed (before any query)
            Any store error: after the pass transaction has been rolled back
        """
        cutoff = self._cutoff(cutoff_date)
        logger.info("Starting zero-balance cleanup with cutoff date %s, dry run: %s", cutoff, self.dry_run)

        groups, pending = self._select_zero_balance(cutoff)
        if not pending:
            logger.info("No zero-balance records found for cleanup")
            return CleanupSummary(dry_run=self.dry_run)

        if self.dry_run:
            plan = ZeroBalancePlan(
                cutoff_date=cutoff,
                groups=groups,
                pending=pending,
                reconcile=self.reconciler.reconcile(pending),
            )
            self.reporter.report_zero_balance_plan(plan)
            logger.info("Dry run for zero-balance records completed")
            return self._summarize(plan.reconcile, dry_run=True)

        with self.store.transaction():
            reconcile_plan = self.reconciler.reconcile(pending)
            self._apply_reconcile_plan(reconcile_plan)

        summary = self._summarize(reconcile_plan, dry_run=False)
        logger.info(
            "Zero-balance cleanup completed: %d ledger entries deleted, %d line items deleted, "
            "%d line items updated",
            summary.ledger_entries_affected,
            summary.line_items_deleted,
            summary.line_items_updated,
        )
        return summary

    def run_orphan_pass(self, emptied_line_item_ids: Sequence[int] = ()) -> CleanupSummary:
        """Delete document headers that own no line items.

        Headers are re-checked inside the pass transaction, so a header that
        gained a line item after planning is kept.

        Args:
            emptied_line_item_ids: Line items an earlier pass of the same run
                deleted (or, in a dry run, would delete)
        """
        logger.info("Starting orphaned header cleanup, dry run: %s", self.dry_run)
        headers = self.orphans.find_orphaned_headers(emptied_line_item_ids)
        if not headers:
            logger.info("No orphaned headers found")
            return CleanupSummary(dry_run=self.dry_run)

        if self.dry_run:
            self.reporter.report_orphaned_headers(headers)
            logger.info("Dry run for orphaned headers completed")
            return CleanupSummary(headers_deleted=len(headers), dry_run=True)

        with self.store.transaction():
            header_ids = self.store.header_ids_without_line_items([header.id for header in headers])
            if len(header_ids) < len(headers):
                logger.warning(
                    "%d headers gained line items since planning and are kept",
                    len(headers) - len(header_ids),
                )
            logger.info("Deleting %d orphaned headers", len(header_ids))
            logger.debug("Header ids: %s", header_ids)
            self.store.delete_headers(header_ids)

        return CleanupSummary(headers_deleted=len(header_ids))

    def run_zero_quantity_pass(self, skip_line_item_ids: Sequence[int] = ()) -> CleanupSummary:
        """Delete line items whose stored quantity is already at or below epsilon.

        Args:
            skip_line_item_ids: Line items an earlier pass of the same run
                already deleted (or, in a dry run, would delete)
        """
        logger.info("Starting zero-quantity line item cleanup, dry run: %s", self.dry_run)
        skipped = set(skip_line_item_ids)
        line_item_ids = [
            line_item_id
            for line_item_id in self.orphans.find_exhausted_line_items()
            if line_item_id not in skipped
        ]
        if not line_item_ids:
            return CleanupSummary(dry_run=self.dry_run)

        if self.dry_run:
            self.reporter.report_exhausted_line_items(line_item_ids)
            return CleanupSummary(
                line_items_deleted=len(line_item_ids),
                dry_run=True,
                deleted_line_item_ids=tuple(line_item_ids),
            )

        with self.store.transaction():
            still_exhausted = set(self.store.exhausted_line_item_ids(self.orphans.epsilon))
            ids = [line_item_id for line_item_id in line_item_ids if line_item_id in still_exhausted]
            logger.info("Deleting %d zero-quantity line items", len(ids))
            logger.debug("Line item ids: %s", ids)
            self.store.delete_line_items(ids)

        return CleanupSummary(line_items_deleted=len(ids), deleted_line_item_ids=tuple(ids))

    def run_all(
        self, cutoff_date: date | str | None = None, include_zero_quantity: bool = False
    ) -> CleanupSummary:
        """Run the zero-balance pass, then (optionally) the zero-quantity pass, then the orphan pass.

        Each pass commits on its own; a failing pass stops the sequence. Line
        items deleted by one pass are handed to the next, so a dry run counts
        the same headers and line items a live run removes.
        """
        cutoff = self._cutoff(cutoff_date)
        summary = self.run_zero_balance_pass(cutoff)
        if include_zero_quantity:
            summary = summary + self.run_zero_quantity_pass(summary.deleted_line_item_ids)
        summary = summary + self.run_orphan_pass(summary.deleted_line_item_ids)
        logger.info("All cleanup operations completed")
        return summary

    def remaining_balance(self) -> PositiveBalanceReport:
        """Report the groups that still carry a positive balance."""
        return self.aggregator.find_positive_balance_groups()
