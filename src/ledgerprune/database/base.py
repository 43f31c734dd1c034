"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerprune.domain.entities import (
    BalanceGroup,
    DocumentHeader,
    GroupKey,
    LedgerEntry,
    LineItem,
    PendingDeletion,
)


class LedgerStore(ABC):
    """Abstract persistent store holding ledger entries, line items and headers."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create missing tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Open the single transaction of a cleanup pass.

        Commits when the block exits normally and rolls back, re-raising,
        when it exits with an exception.
        """
        pass

    # Record creation (used by upstream loaders and tests)
    @abstractmethod
    def create_header(
        self,
        header_number: str,
        form_date: Optional[date] = None,
        partner_id: Optional[int] = None,
        form_type: Optional[int] = None,
    ) -> int:
        """Create a document header. Returns header ID."""
        pass

    @abstractmethod
    def create_line_item(self, header_id: int, quantity: float) -> int:
        """Create a line item. Returns line item ID."""
        pass

    @abstractmethod
    def create_ledger_entry(
        self,
        line_item_id: int,
        entry_type: int,
        quantity: float,
        entry_date: date,
        document_group_id: Optional[int],
        item_id: int,
        location_id: int,
        shop_id: int,
        account_id: int,
    ) -> int:
        """Create a ledger entry. Returns ledger entry ID."""
        pass

    # Single-row reads
    @abstractmethod
    def get_header(self, header_id: int) -> Optional[DocumentHeader]:
        """Get document header by ID."""
        pass

    @abstractmethod
    def get_line_item(self, line_item_id: int) -> Optional[LineItem]:
        """Get line item by ID."""
        pass

    @abstractmethod
    def get_ledger_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def get_ledger_contribution(self, entry_id: int) -> Optional[float]:
        """Get the signed contribution (type * quantity) of a ledger entry."""
        pass

    @abstractmethod
    def get_line_item_quantity(self, line_item_id: int) -> Optional[float]:
        """Get the currently stored quantity of a line item."""
        pass

    # Aggregates and joins
    @abstractmethod
    def zero_balance_groups(self, cutoff_date: date, account_id: int) -> list[BalanceGroup]:
        """Groups whose signed sum up to the cutoff is exactly zero, ordered by key."""
        pass

    @abstractmethod
    def positive_balance_groups(self, account_id: int, limit: int) -> list[BalanceGroup]:
        """First ``limit`` groups (by key) whose signed sum is positive."""
        pass

    @abstractmethod
    def count_positive_balance_groups(self, account_id: int) -> int:
        """Number of groups whose signed sum is positive."""
        pass

    @abstractmethod
    def pending_deletions(
        self, keys: Sequence[GroupKey], cutoff_date: date, account_id: int
    ) -> list[PendingDeletion]:
        """Ledger entries of the given groups dated on/before cutoff, with their owners."""
        pass

    @abstractmethod
    def orphaned_headers(self, excluding_line_item_ids: Sequence[int] = ()) -> list[DocumentHeader]:
        """Headers without any line item outside ``excluding_line_item_ids``, ordered by ID."""
        pass

    @abstractmethod
    def header_ids_without_line_items(self, header_ids: Sequence[int]) -> list[int]:
        """Subset of ``header_ids`` that currently own no line item."""
        pass

    @abstractmethod
    def exhausted_line_item_ids(self, epsilon: float) -> list[int]:
        """Line items whose stored quantity is at or below ``epsilon``."""
        pass

    # Mutations (only inside transaction())
    @abstractmethod
    def update_line_item_quantity(self, line_item_id: int, quantity: float) -> None:
        """Store a new quantity for a line item."""
        pass

    @abstractmethod
    def delete_ledger_entries(self, ids: Sequence[int]) -> int:
        """Delete ledger entries by ID. Returns number of deleted rows."""
        pass

    @abstractmethod
    def delete_line_items(self, ids: Sequence[int]) -> int:
        """Delete line items by ID. Returns number of deleted rows."""
        pass

    @abstractmethod
    def delete_headers(self, ids: Sequence[int]) -> int:
        """Delete document headers by ID. Returns number of deleted rows."""
        pass
