"""Lazy access to the configuration and store shared by CLI commands.

The group callback only records its options. Configuration, logging and the
store are set up the first time a command asks for them, after click has
parsed the command's own arguments, so ``--help`` never touches a database.
"""

import os

import click

from ledgerprune.cli.error_handling import handle_domain_error
from ledgerprune.config import CleanupConfig, load_config
from ledgerprune.database.base import LedgerStore
from ledgerprune.database.factories import create_store_from_config
from ledgerprune.domain.errors import ValidationError
from ledgerprune.logging_config import configure_logging


def get_config(ctx: click.Context) -> CleanupConfig:
    """Return the run configuration, building it and logging on first use."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        options = obj.get("options", {})
        environ = dict(os.environ)
        if options.get("database_url"):
            environ["LEDGERPRUNE_DATABASE_URL"] = options["database_url"]
        try:
            config = load_config(environ)
        except ValidationError as e:
            handle_domain_error(ctx, e)
        isolation_level = options.get("isolation_level")
        config = config.with_overrides(
            log_file=options.get("log_file"),
            isolation_level=isolation_level.upper() if isolation_level else None,
        )
        configure_logging(config.log_file, options.get("verbose", False))
        obj["config"] = config
    return obj["config"]


def get_store(ctx: click.Context) -> LedgerStore:
    """Return the connected ledger store, opening it on first use."""
    obj = ctx.ensure_object(dict)
    if "store" not in obj:
        store = create_store_from_config(get_config(ctx))
        store.connect()
        store.initialize_schema()
        ctx.find_root().call_on_close(store.disconnect)
        obj["store"] = store
    return obj["store"]
