"""Mapper functions to convert SQLAlchemy models and rows to domain entities.

Aggregate queries return plain rows rather than models; they are converted
here as well so the store never hands SQLAlchemy objects to the domain layer.
"""

from datetime import date
from typing import Any

from ledgerprune.domain import entities as domain
from ledgerprune.database.models import (
    DocumentHeader as ORMDocumentHeader,
    LineItem as ORMLineItem,
    LedgerEntry as ORMLedgerEntry,
)


def header_to_domain(orm_header: ORMDocumentHeader) -> domain.DocumentHeader:
    """Convert SQLAlchemy DocumentHeader model to domain DocumentHeader entity."""
    return domain.DocumentHeader(
        id=orm_header.id,
        header_number=orm_header.header_number,
        form_date=orm_header.form_date,
        partner_id=orm_header.partner_id,
        form_type=orm_header.form_type,
    )


def line_item_to_domain(orm_line_item: ORMLineItem) -> domain.LineItem:
    """Convert SQLAlchemy LineItem model to domain LineItem entity."""
    return domain.LineItem(
        id=orm_line_item.id,
        header_id=orm_line_item.header_id,
        quantity=float(orm_line_item.quantity),
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        document_group_id=orm_entry.document_group_id,
        item_id=orm_entry.item_id,
        location_id=orm_entry.location_id,
        shop_id=orm_entry.shop_id,
        entry_type=orm_entry.entry_type,
        quantity=float(orm_entry.quantity),
        entry_date=orm_entry.entry_date,
        line_item_id=orm_entry.line_item_id,
    )


def _as_date(value: Any) -> date | None:
    # Some backends hand aggregated dates back as ISO strings.
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def balance_row_to_domain(row: Any) -> domain.BalanceGroup:
    """Convert an aggregate balance row to a domain BalanceGroup."""
    return domain.BalanceGroup(
        document_group_id=row.document_group_id,
        item_id=row.item_id,
        location_id=row.location_id,
        shop_id=row.shop_id,
        total_purchases=float(row.total_purchases or 0.0),
        total_sales=float(row.total_sales or 0.0),
        net_balance=float(row.net_balance or 0.0),
        last_entry_date=_as_date(row.last_entry_date),
        entry_count=int(row.entry_count or 0),
    )


def pending_row_to_domain(row: Any) -> domain.PendingDeletion:
    """Convert a resolver join row to a domain PendingDeletion."""
    return domain.PendingDeletion(
        ledger_entry_id=row.ledger_entry_id,
        line_item_id=row.line_item_id,
        header_id=row.header_id,
        entry_date=_as_date(row.entry_date),
        group_key=domain.GroupKey(
            row.document_group_id, row.item_id, row.location_id, row.shop_id
        ),
    )
