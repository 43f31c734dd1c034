"""Cleanup pass commands."""

import logging

import click
from sqlalchemy.exc import SQLAlchemyError

from ledgerprune.cli.context import get_config, get_store
from ledgerprune.cli.error_handling import handle_domain_error, handle_store_error
from ledgerprune.cli.report import ClickReporter, echo_positive_balance, echo_summary
from ledgerprune.domain.cleanup import CleanupService
from ledgerprune.domain.errors import DomainError

logger = logging.getLogger(__name__)

cutoff_option = click.option(
    "--cutoff-date",
    help="Inclusive cutoff date, YYYY-MM-DD (default: LEDGERPRUNE_CUTOFF_DATE or 2024-01-01)",
)
dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be deleted without changing anything (also LEDGERPRUNE_DRY_RUN=true)",
)


def _build_service(ctx, cutoff_date: str | None, dry_run: bool) -> CleanupService:
    """Apply command options to the shared configuration and build the service."""
    try:
        config = get_config(ctx).with_overrides(
            cutoff_date=cutoff_date,
            dry_run=True if dry_run else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    return CleanupService(get_store(ctx), config, reporter=ClickReporter())


def _echo_header(service: CleanupService) -> None:
    config = service.config
    click.echo(f"Cutoff date: {config.cutoff_date.isoformat()}")
    click.echo(f"Dry run mode: {config.dry_run}")
    if config.log_file:
        click.echo(f"Log file: {config.log_file}")


def _run_pass(ctx, run, *args):
    """Run one pass, turning domain and store failures into CLI errors."""
    try:
        return run(*args)
    except DomainError as e:
        logger.error("Cleanup pass failed: %s", e)
        handle_domain_error(ctx, e)
    except SQLAlchemyError as e:
        handle_store_error(ctx, e)


@click.command("zero-balance")
@cutoff_option
@dry_run_option
@click.pass_context
def zero_balance(ctx, cutoff_date: str | None, dry_run: bool):
    """Delete ledger entries of groups that balanced out to zero by the cutoff.

    Line items the deleted entries contributed to are reduced by the deleted
    quantity, or deleted when nothing remains.
    """
    service = _build_service(ctx, cutoff_date, dry_run)
    _echo_header(service)
    click.echo("\n=== Cleaning up zero-balance groups ===")
    summary = _run_pass(ctx, service.run_zero_balance_pass)
    if summary.is_empty:
        click.echo("No groups with zero balance found.")
        return
    echo_summary(summary)
    if not summary.dry_run:
        click.echo("Zero-balance cleanup completed successfully!")


@click.command("orphans")
@dry_run_option
@click.pass_context
def orphans(ctx, dry_run: bool):
    """Delete document headers that have no line items left."""
    service = _build_service(ctx, None, dry_run)
    click.echo("\n=== Cleaning up orphaned headers ===")
    summary = _run_pass(ctx, service.run_orphan_pass)
    if summary.is_empty:
        click.echo("No orphaned headers found.")
        return
    echo_summary(summary)
    if not summary.dry_run:
        click.echo("Orphaned headers cleanup completed successfully!")


@click.command("zero-quantity")
@dry_run_option
@click.pass_context
def zero_quantity(ctx, dry_run: bool):
    """Delete line items whose stored quantity is already zero."""
    service = _build_service(ctx, None, dry_run)
    click.echo("\n=== Cleaning up zero-quantity line items ===")
    summary = _run_pass(ctx, service.run_zero_quantity_pass)
    if summary.is_empty:
        click.echo("No zero-quantity line items found.")
        return
    echo_summary(summary)


@click.command("run")
@cutoff_option
@dry_run_option
@click.option(
    "--include-zero-quantity",
    is_flag=True,
    help="Also delete line items whose stored quantity is already zero",
)
@click.pass_context
def run_all(ctx, cutoff_date: str | None, dry_run: bool, include_zero_quantity: bool):
    """Run every cleanup step: zero-balance groups, orphaned headers, summary.

    Examples:
        ledgerprune run --cutoff-date 2024-01-01 --dry-run
        ledgerprune --database-url sqlite:///ledger.db run --cutoff-date 2023-12-31
    """
    service = _build_service(ctx, cutoff_date, dry_run)
    _echo_header(service)

    click.echo("\n=== STEP 1: Cleaning up zero-balance groups ===")
    summary = _run_pass(ctx, service.run_zero_balance_pass)
    echo_summary(summary)

    if include_zero_quantity:
        click.echo("\n=== Cleaning up zero-quantity line items ===")
        quantity_summary = _run_pass(
            ctx, service.run_zero_quantity_pass, summary.deleted_line_item_ids
        )
        echo_summary(quantity_summary)
        summary = summary + quantity_summary

    click.echo("\n=== STEP 2: Cleaning up orphaned headers ===")
    orphan_summary = _run_pass(ctx, service.run_orphan_pass, summary.deleted_line_item_ids)
    echo_summary(orphan_summary)
    summary = summary + orphan_summary

    click.echo("\n=== STEP 3: Summary ===")
    echo_positive_balance(_run_pass(ctx, service.remaining_balance))
    click.echo("\nTotals:")
    echo_summary(summary)
    click.echo("\nAll cleanup operations completed successfully!")


def register_commands(cli):
    """Register cleanup commands with main CLI."""
    cli.add_command(zero_balance)
    cli.add_command(orphans)
    cli.add_command(zero_quantity)
    cli.add_command(run_all)
