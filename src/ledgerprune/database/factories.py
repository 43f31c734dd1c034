"""Store factory functions for creating ledger store instances."""

from typing import Optional

from ledgerprune.config import CleanupConfig, DELETE_BATCH_SIZE, default_isolation_level
from ledgerprune.database.sqlalchemy_db import SQLAlchemyLedgerStore


def create_store(
    database_url: str,
    isolation_level: Optional[str] = None,
    batch_size: int = DELETE_BATCH_SIZE,
) -> SQLAlchemyLedgerStore:
    """Create a ledger store for any SQLAlchemy database URL.

    Args:
        database_url: SQLAlchemy database URL
        isolation_level: Isolation level for pass transactions. If None, a
            level preventing non-repeatable reads is chosen for the backend.
        batch_size: Maximum identifiers per delete statement

    Returns:
        SQLAlchemyLedgerStore instance
    """
    if isolation_level is None:
        isolation_level = default_isolation_level(database_url)
    return SQLAlchemyLedgerStore(database_url, isolation_level=isolation_level, batch_size=batch_size)


def create_sqlite_store(database_path: str, batch_size: int = DELETE_BATCH_SIZE) -> SQLAlchemyLedgerStore:
    """Create a ledger store backed by a SQLite file.

    Args:
        database_path: Path to SQLite database file

    Returns:
        SQLAlchemyLedgerStore instance configured for SQLite
    """
    return create_store(f"sqlite:///{database_path}", batch_size=batch_size)


def create_store_from_config(config: CleanupConfig) -> SQLAlchemyLedgerStore:
    """Create the ledger store described by a cleanup configuration."""
    return create_store(
        config.database_url,
        isolation_level=config.effective_isolation_level,
        batch_size=config.batch_size,
    )
