"""Domain model entities for ledgerprune.

These are pure data classes, independent of the database schema. Stored
records (ledger entries, line items, document headers) are mirrored one to
one; balance groups, pending deletions and plans are derived values that
only live for the duration of a single cleanup pass.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple, Optional


class GroupKey(NamedTuple):
    """Grouping key shared by ledger entries of one balance group."""

    document_group_id: int
    item_id: int
    location_id: int
    shop_id: int


@dataclass(frozen=True)
class DocumentHeader:
    """Document header domain entity. Owns zero or more line items."""

    id: int
    header_number: str
    form_date: Optional[date]
    partner_id: Optional[int]
    form_type: Optional[int]


@dataclass(frozen=True)
class LineItem:
    """Quantity-bearing line item owned by exactly one document header."""

    id: int
    header_id: int
    quantity: float


@dataclass(frozen=True)
class LedgerEntry:
    """Single signed posting of a quantity."""

    id: int
    account_id: int
    document_group_id: Optional[int]
    item_id: int
    location_id: int
    shop_id: int
    entry_type: int
    quantity: float
    entry_date: date
    line_item_id: int

    @property
    def signed_quantity(self) -> float:
        return self.entry_type * self.quantity


@dataclass(frozen=True)
class BalanceGroup:
    """Aggregation over ledger entries sharing a grouping key."""

    document_group_id: int
    item_id: int
    location_id: int
    shop_id: int
    total_purchases: float
    total_sales: float
    net_balance: float
    last_entry_date: Optional[date] = None
    entry_count: int = 0

    @property
    def key(self) -> GroupKey:
        return GroupKey(self.document_group_id, self.item_id, self.location_id, self.shop_id)


@dataclass(frozen=True)
class PositiveBalanceReport:
    """Preview of groups that still carry a positive balance."""

    groups: tuple[BalanceGroup, ...]
    total_count: int


@dataclass(frozen=True)
class PendingDeletion:
    """One ledger entry selected for removal, with its dependent records."""

    ledger_entry_id: int
    line_item_id: int
    header_id: int
    entry_date: date
    group_key: Optional[GroupKey] = None


@dataclass(frozen=True)
class LineItemUpdate:
    """Quantity reduction decided for a line item that survives the pass."""

    line_item_id: int
    current_quantity: float
    reduction: float
    new_quantity: float


@dataclass(frozen=True)
class ReconcilePlan:
    """Mutations a zero-balance pass applies inside its transaction."""

    ledger_entry_ids: tuple[int, ...] = ()
    to_delete_line_items: tuple[int, ...] = ()
    to_update_line_items: tuple[LineItemUpdate, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.ledger_entry_ids or self.to_delete_line_items or self.to_update_line_items)


@dataclass(frozen=True)
class ZeroBalancePlan:
    """Everything a zero-balance pass selected, from groups down to mutations."""

    cutoff_date: date
    groups: tuple[BalanceGroup, ...] = ()
    pending: tuple[PendingDeletion, ...] = ()
    reconcile: ReconcilePlan = field(default_factory=ReconcilePlan)


@dataclass(frozen=True)
class DeletionStats:
    """Distinct record counts touched by a set of pending deletions."""

    ledger_entries: int
    line_items: int
    headers: int


@dataclass(frozen=True)
class CleanupSummary:
    """Counts of what a pass changed (or would change, for a dry run)."""

    ledger_entries_affected: int = 0
    line_items_updated: int = 0
    line_items_deleted: int = 0
    headers_deleted: int = 0
    dry_run: bool = False
    # Line items this summary deleted (or would delete); later passes of the
    # same run treat them as gone.
    deleted_line_item_ids: tuple[int, ...] = field(default=(), compare=False, repr=False)

    def __add__(self, other: "CleanupSummary") -> "CleanupSummary":
        if not isinstance(other, CleanupSummary):
            return NotImplemented
        return CleanupSummary(
            ledger_entries_affected=self.ledger_entries_affected + other.ledger_entries_affected,
            line_items_updated=self.line_items_updated + other.line_items_updated,
            line_items_deleted=self.line_items_deleted + other.line_items_deleted,
            headers_deleted=self.headers_deleted + other.headers_deleted,
            dry_run=self.dry_run or other.dry_run,
            deleted_line_item_ids=self.deleted_line_item_ids + other.deleted_line_item_ids,
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.ledger_entries_affected == 0
            and self.line_items_updated == 0
            and self.line_items_deleted == 0
            and self.headers_deleted == 0
        )
