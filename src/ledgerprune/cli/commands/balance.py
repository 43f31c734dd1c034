"""Balance report command."""

import click
from sqlalchemy.exc import SQLAlchemyError

from ledgerprune.cli.context import get_store
from ledgerprune.cli.error_handling import handle_store_error
from ledgerprune.cli.report import echo_positive_balance
from ledgerprune.config import POSITIVE_BALANCE_PREVIEW
from ledgerprune.domain.balance import BalanceAggregator


@click.command("balance")
@click.option("--limit", type=click.IntRange(min=1), default=POSITIVE_BALANCE_PREVIEW, show_default=True, help="Number of groups to show")
@click.pass_context
def show_balance(ctx, limit: int):
    """Show groups that still carry a positive balance."""
    aggregator = BalanceAggregator(get_store(ctx))
    try:
        report = aggregator.find_positive_balance_groups(limit=limit)
    except SQLAlchemyError as e:
        handle_store_error(ctx, e)
    echo_positive_balance(report)


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(show_balance)
