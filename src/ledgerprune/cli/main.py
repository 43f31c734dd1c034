"""Main CLI entry point."""

import click
from dotenv import load_dotenv

# Import and register all commands at module level
from ledgerprune.cli.commands import balance, cleanup

ISOLATION_LEVELS = ["READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"]


@click.group()
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides LEDGERPRUNE_DATABASE_URL and the DB_* variables)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Log file path (default: cleanup_<timestamp>.log, or LEDGERPRUNE_LOG_FILE)",
)
@click.option(
    "--isolation-level",
    type=click.Choice(ISOLATION_LEVELS, case_sensitive=False),
    help="Transaction isolation level (default: REPEATABLE READ, SERIALIZABLE on SQLite)",
)
@click.option("--verbose", "-v", is_flag=True, help="Also log to stderr, including per line item decisions")
@click.pass_context
def cli(ctx, database_url: str | None, log_file: str | None, isolation_level: str | None, verbose: bool):
    """Ledgerprune - zero-balance ledger cleanup.

    Deletes ledger entries whose groups have balanced out to zero by a cutoff
    date, shrinks or removes the line items they contributed to, and removes
    document headers left without line items.
    """
    ctx.ensure_object(dict)

    # Configuration and store are built lazily by the commands (see
    # ledgerprune.cli.context), not when showing help
    ctx.obj["options"] = {
        "database_url": database_url,
        "log_file": log_file,
        "isolation_level": isolation_level,
        "verbose": verbose,
    }


# Register all commands
cleanup.register_commands(cli)
balance.register_commands(cli)


def main():
    """Main entry point for CLI."""
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
