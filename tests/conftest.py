"""Shared pytest fixtures for ledgerprune tests."""

import logging
import tempfile
import os
from datetime import date
import pytest

from ledgerprune.config import CleanupConfig, LEDGER_ACCOUNT_CLASS
from ledgerprune.database.factories import create_sqlite_store
from ledgerprune.domain.cleanup import CleanupReporter, CleanupService


class LedgerBuilder:
    """Seeds headers, line items and ledger entries through the store."""

    def __init__(self, store):
        self.store = store
        self._next_header = 1

    def header(self, header_number=None, form_date=date(2023, 1, 1), partner_id=1, form_type=1):
        if header_number is None:
            header_number = f"DOC-{self._next_header:04d}"
            self._next_header += 1
        return self.store.create_header(
            header_number=header_number,
            form_date=form_date,
            partner_id=partner_id,
            form_type=form_type,
        )

    def line_item(self, header_id, quantity):
        return self.store.create_line_item(header_id=header_id, quantity=quantity)

    def entry(
        self,
        line_item_id,
        entry_type,
        quantity,
        entry_date,
        group=1,
        item=10,
        location=100,
        shop=1000,
        account=LEDGER_ACCOUNT_CLASS,
    ):
        return self.store.create_ledger_entry(
            line_item_id=line_item_id,
            entry_type=entry_type,
            quantity=quantity,
            entry_date=entry_date,
            document_group_id=group,
            item_id=item,
            location_id=location,
            shop_id=shop,
            account_id=account,
        )

    def document(self, quantity, entry_type, entry_date, **key):
        """Create a header with one line item and one ledger entry for its full quantity.

        Returns (header_id, line_item_id, entry_id).
        """
        header_id = self.header(form_date=entry_date)
        line_item_id = self.line_item(header_id, quantity)
        entry_id = self.entry(line_item_id, entry_type, quantity, entry_date, **key)
        return header_id, line_item_id, entry_id


class RecordingReporter(CleanupReporter):
    """Keeps every dry-run plan it receives."""

    def __init__(self):
        self.zero_balance_plans = []
        self.orphaned_headers = []
        self.exhausted_line_items = []

    def report_zero_balance_plan(self, plan):
        self.zero_balance_plans.append(plan)

    def report_orphaned_headers(self, headers):
        self.orphaned_headers.append(list(headers))

    def report_exhausted_line_items(self, line_item_ids):
        self.exhausted_line_items.append(list(line_item_ids))


@pytest.fixture
def temp_store():
    """Create a temporary SQLite ledger store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    # Cleanup
    store.disconnect()
    store.session_factory.kw["bind"].dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger(temp_store):
    """Create a LedgerBuilder bound to the temporary store."""
    return LedgerBuilder(temp_store)


@pytest.fixture
def config(temp_store):
    """Create a live-run configuration pointing at the temporary store."""
    return CleanupConfig(database_url=temp_store.database_url, cutoff_date=date(2024, 1, 1))


@pytest.fixture
def reporter():
    """Create a reporter recording dry-run plans."""
    return RecordingReporter()


@pytest.fixture
def cleanup_service(temp_store, config, reporter):
    """Create a live-run CleanupService."""
    return CleanupService(temp_store, config, reporter=reporter)


@pytest.fixture
def dry_run_service(temp_store, config, reporter):
    """Create a dry-run CleanupService."""
    return CleanupService(temp_store, config.with_overrides(dry_run=True), reporter=reporter)


@pytest.fixture
def balanced_documents(ledger):
    """One purchase of 10 sold as 6 and 4, each on its own document, all in group 1.

    Returns a dict of header, line item and entry IDs keyed by role.
    """
    purchase = ledger.document(10.0, +1, date(2023, 1, 5))
    sale_a = ledger.document(6.0, -1, date(2023, 2, 10))
    sale_b = ledger.document(4.0, -1, date(2023, 3, 15))
    return {"purchase": purchase, "sale_a": sale_a, "sale_b": sale_b}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def package_logger():
    """Restore the package logger after a test configured it."""
    logger = logging.getLogger("ledgerprune")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
