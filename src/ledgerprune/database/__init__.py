"""Database layer for ledgerprune application."""

from ledgerprune.database.base import LedgerStore
from ledgerprune.database.factories import create_sqlite_store, create_store

__all__ = ["LedgerStore", "create_sqlite_store", "create_store"]
