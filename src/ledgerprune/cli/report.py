"""Human-readable rendering of plans, reports and summaries."""

from typing import Sequence

import click

from ledgerprune.domain.cleanup import CleanupReporter, calculate_stats
from ledgerprune.domain.entities import (
    CleanupSummary,
    DocumentHeader,
    PositiveBalanceReport,
    ZeroBalancePlan,
)

PREVIEW_ROWS = 20


def _echo_more(total: int) -> None:
    if total > PREVIEW_ROWS:
        click.echo(f"... and {total - PREVIEW_ROWS} more records")


def echo_zero_balance_plan(plan: ZeroBalancePlan) -> None:
    """Show the records a zero-balance pass would delete or update."""
    stats = calculate_stats(plan.pending)
    click.echo(f"Found {len(plan.groups)} groups with zero balance on or before {plan.cutoff_date}")
    click.echo("Records that will be processed:")
    click.echo(f"  Ledger entries: {stats.ledger_entries}")
    click.echo(f"  Line items: {stats.line_items}")
    click.echo(f"  Headers: {stats.headers}")

    click.echo("\nLedger entries that would be deleted:")
    click.echo(f"{'EntryID':<10} {'LineItemID':<10} {'HeaderID':<10} {'Date':<12}")
    click.echo("-" * 50)
    for record in plan.pending[:PREVIEW_ROWS]:
        click.echo(
            f"{record.ledger_entry_id:<10d} {record.line_item_id:<10d} "
            f"{record.header_id:<10d} {record.entry_date.isoformat():<12}"
        )
    _echo_more(len(plan.pending))

    reconcile = plan.reconcile
    click.echo(f"\nLine items that would be deleted: {len(reconcile.to_delete_line_items)}")
    click.echo(f"Line items that would be reduced: {len(reconcile.to_update_line_items)}")
    for update in reconcile.to_update_line_items[:PREVIEW_ROWS]:
        click.echo(
            f"  Line item {update.line_item_id}: {update.current_quantity:.3f} -> {update.new_quantity:.3f}"
        )
    _echo_more(len(reconcile.to_update_line_items))


def echo_orphaned_headers(headers: Sequence[DocumentHeader]) -> None:
    """Show orphaned headers that would be deleted."""
    click.echo("\nOrphaned headers that would be deleted:")
    click.echo(f"{'ID':<10} {'HeaderNo':<20} {'FormDate':<12} {'PartnerID':<10} {'FormType':<10}")
    click.echo("-" * 72)
    for header in headers[:PREVIEW_ROWS]:
        form_date = header.form_date.isoformat() if header.form_date else ""
        partner = "" if header.partner_id is None else str(header.partner_id)
        form_type = "" if header.form_type is None else str(header.form_type)
        click.echo(f"{header.id:<10d} {header.header_number:<20} {form_date:<12} {partner:<10} {form_type:<10}")
    _echo_more(len(headers))


def echo_exhausted_line_items(line_item_ids: Sequence[int]) -> None:
    """Show zero-quantity line items that would be deleted."""
    click.echo(f"\nZero-quantity line items that would be deleted: {len(line_item_ids)}")
    preview = ", ".join(str(line_item_id) for line_item_id in line_item_ids[:PREVIEW_ROWS])
    if preview:
        click.echo(f"  {preview}")
    _echo_more(len(line_item_ids))


def echo_positive_balance(report: PositiveBalanceReport) -> None:
    """Show groups that still carry a positive balance."""
    click.echo(f"\nRemaining groups with positive balance (first {len(report.groups)}):")
    click.echo(
        f"{'GroupID':<10} {'ItemID':<8} {'Location':<10} {'Shop':<8} "
        f"{'Purchases':<12} {'Sales':<12} {'Balance':<12} {'Entries':<8}"
    )
    click.echo("-" * 90)
    if not report.groups:
        click.echo("No groups with positive balance found.")
    for group in report.groups:
        click.echo(
            f"{group.document_group_id:<10d} {group.item_id:<8d} {group.location_id:<10d} "
            f"{group.shop_id:<8d} {group.total_purchases:<12.3f} {group.total_sales:<12.3f} "
            f"{group.net_balance:<12.3f} {group.entry_count:<8d}"
        )
    click.echo(f"\nTotal groups with positive balance: {report.total_count}")


def echo_summary(summary: CleanupSummary) -> None:
    """Show the counts of a pass summary."""
    verb = "would be" if summary.dry_run else "were"
    click.echo(f"Ledger entries that {verb} deleted: {summary.ledger_entries_affected}")
    click.echo(f"Line items that {verb} updated: {summary.line_items_updated}")
    click.echo(f"Line items that {verb} deleted: {summary.line_items_deleted}")
    click.echo(f"Headers that {verb} deleted: {summary.headers_deleted}")


class ClickReporter(CleanupReporter):
    """Prints dry-run plans to the terminal."""

    def report_zero_balance_plan(self, plan: ZeroBalancePlan) -> None:
        click.echo("\n=== DRY RUN MODE - No actual deletion will occur ===")
        echo_zero_balance_plan(plan)

    def report_orphaned_headers(self, headers: Sequence[DocumentHeader]) -> None:
        click.echo("\n=== DRY RUN MODE - No actual deletion will occur ===")
        echo_orphaned_headers(headers)

    def report_exhausted_line_items(self, line_item_ids: Sequence[int]) -> None:
        click.echo("\n=== DRY RUN MODE - No actual deletion will occur ===")
        echo_exhausted_line_items(line_item_ids)
