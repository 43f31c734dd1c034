"""CLI error handling helpers."""

import logging

import click
from sqlalchemy.exc import SQLAlchemyError

from ledgerprune.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_store_error(ctx: click.Context, error: SQLAlchemyError) -> None:
    """Log a store failure (the pass was rolled back) and exit with failure."""
    logger.exception("Cleanup pass failed and was rolled back")
    click.echo(f"Error: database operation failed, no changes were applied: {error}", err=True)
    ctx.exit(1)
