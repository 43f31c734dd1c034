"""Tests for the command line interface."""

from datetime import date

import pytest

from ledgerprune.cli.main import cli

CLEAN_ENV = {
    "LEDGERPRUNE_DATABASE_URL": None,
    "LEDGERPRUNE_CUTOFF_DATE": None,
    "LEDGERPRUNE_DRY_RUN": None,
    "LEDGERPRUNE_LOG_FILE": None,
    "LEDGERPRUNE_ISOLATION_LEVEL": None,
    "CUTOFF_DATE": None,
    "DRY_RUN": None,
    "LOG_FILE": None,
    "DB_HOST": None,
    "DB_PORT": None,
    "DB_USER": None,
    "DB_PASSWORD": None,
    "DB_NAME": None,
}


@pytest.fixture(autouse=True)
def _reset_logging(package_logger):
    yield


@pytest.fixture
def invoke(cli_runner, temp_store, tmp_path):
    """Invoke the CLI against the temporary store with a log file under tmp_path."""
    log_file = tmp_path / "cleanup.log"

    def run(*args, env=None):
        return cli_runner.invoke(
            cli,
            ["--database-url", temp_store.database_url, "--log-file", str(log_file), *args],
            env=dict(CLEAN_ENV, **(env or {})),
        )

    run.log_file = log_file
    return run


def test_help_does_not_need_a_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"], env=CLEAN_ENV)

    assert result.exit_code == 0
    assert "zero-balance" in result.output
    assert "orphans" in result.output


def test_missing_database_settings(cli_runner):
    result = cli_runner.invoke(cli, ["balance"], env=CLEAN_ENV)

    assert result.exit_code == 1
    assert "Error: Missing required database configuration" in result.output


def test_subcommand_help_does_not_touch_the_database(cli_runner, tmp_path):
    database = tmp_path / "ledger.db"
    log_file = tmp_path / "cleanup.log"

    result = cli_runner.invoke(
        cli,
        ["--database-url", f"sqlite:///{database}", "--log-file", str(log_file), "run", "--help"],
        env=CLEAN_ENV,
    )

    assert result.exit_code == 0, result.output
    assert "--include-zero-quantity" in result.output
    assert not database.exists()
    assert not log_file.exists()


def test_invalid_database_port(cli_runner):
    env = dict(CLEAN_ENV, DB_USER="cleaner", DB_PASSWORD="pw", DB_NAME="stock", DB_PORT="abc")

    result = cli_runner.invoke(cli, ["balance"], env=env)

    assert result.exit_code == 1
    assert "Error: Invalid database port 'abc'" in result.output


def test_run_deletes_everything_balanced(invoke, temp_store, balanced_documents):
    result = invoke("run", "--cutoff-date", "2024-01-01")

    assert result.exit_code == 0, result.output
    assert "Cutoff date: 2024-01-01" in result.output
    assert "=== STEP 1: Cleaning up zero-balance groups ===" in result.output
    assert "Ledger entries that were deleted: 3" in result.output
    assert "Headers that were deleted: 3" in result.output
    assert "Total groups with positive balance: 0" in result.output
    assert "All cleanup operations completed successfully!" in result.output
    for header_id, line_item_id, entry_id in balanced_documents.values():
        assert temp_store.get_ledger_entry(entry_id) is None
        assert temp_store.get_line_item(line_item_id) is None
        assert temp_store.get_header(header_id) is None


def test_run_dry_run_changes_nothing(invoke, temp_store, balanced_documents):
    result = invoke("run", "--dry-run")

    assert result.exit_code == 0, result.output
    assert "Dry run mode: True" in result.output
    assert "=== DRY RUN MODE - No actual deletion will occur ===" in result.output
    assert "Found 1 groups with zero balance on or before 2024-01-01" in result.output
    assert "Ledger entries that would be deleted: 3" in result.output
    assert "Headers that would be deleted: 3" in result.output
    for header_id, line_item_id, entry_id in balanced_documents.values():
        assert temp_store.get_ledger_entry(entry_id) is not None
        assert temp_store.get_line_item(line_item_id) is not None
        assert temp_store.get_header(header_id) is not None


def test_dry_run_from_environment(invoke, temp_store, balanced_documents):
    result = invoke("zero-balance", env={"LEDGERPRUNE_DRY_RUN": "true"})

    assert result.exit_code == 0, result.output
    assert "Ledger entries that would be deleted: 3" in result.output
    _, _, entry_id = balanced_documents["purchase"]
    assert temp_store.get_ledger_entry(entry_id) is not None


def test_cutoff_from_environment(invoke, balanced_documents):
    result = invoke("zero-balance", "--dry-run", env={"LEDGERPRUNE_CUTOFF_DATE": "2023-02-28"})

    assert result.exit_code == 0, result.output
    assert "Cutoff date: 2023-02-28" in result.output
    assert "No groups with zero balance found." in result.output


def test_invalid_cutoff(invoke, temp_store, balanced_documents):
    result = invoke("run", "--cutoff-date", "2024-1-1")

    assert result.exit_code == 1
    assert "Error: Invalid cutoff date '2024-1-1': expected YYYY-MM-DD" in result.output
    _, _, entry_id = balanced_documents["purchase"]
    assert temp_store.get_ledger_entry(entry_id) is not None


def test_zero_balance_then_orphans(invoke, temp_store, balanced_documents):
    first = invoke("zero-balance")
    assert first.exit_code == 0, first.output
    assert "Zero-balance cleanup completed successfully!" in first.output

    second = invoke("orphans")
    assert second.exit_code == 0, second.output
    assert "Headers that were deleted: 3" in second.output

    third = invoke("orphans")
    assert "No orphaned headers found." in third.output


def test_orphans_dry_run_lists_headers(invoke, ledger):
    ledger.header(header_number="INV-0042", partner_id=7)

    result = invoke("orphans", "--dry-run")

    assert result.exit_code == 0, result.output
    assert "INV-0042" in result.output
    assert "Headers that would be deleted: 1" in result.output


def test_zero_quantity(invoke, temp_store, ledger):
    header_id = ledger.header()
    empty = ledger.line_item(header_id, 0.0)

    result = invoke("zero-quantity")

    assert result.exit_code == 0, result.output
    assert "Line items that were deleted: 1" in result.output
    assert temp_store.get_line_item(empty) is None


def test_run_with_zero_quantity(invoke, temp_store, ledger):
    header_id = ledger.header()
    empty = ledger.line_item(header_id, 0.0)

    result = invoke("run", "--include-zero-quantity")

    assert result.exit_code == 0, result.output
    assert "=== Cleaning up zero-quantity line items ===" in result.output
    assert temp_store.get_line_item(empty) is None
    assert temp_store.get_header(header_id) is None


def test_balance(invoke, ledger):
    for group in range(1, 4):
        ledger.document(2.5, +1, date(2023, 1, 1), group=group)

    result = invoke("balance", "--limit", "2")

    assert result.exit_code == 0, result.output
    assert "Remaining groups with positive balance (first 2):" in result.output
    assert "Total groups with positive balance: 3" in result.output
    assert "2.500" in result.output


def test_balance_limit_must_be_positive(invoke):
    result = invoke("balance", "--limit", "0")

    assert result.exit_code == 2


def test_log_file_written(invoke, balanced_documents):
    result = invoke("zero-balance")

    assert result.exit_code == 0, result.output
    content = invoke.log_file.read_text()
    assert "Starting zero-balance cleanup with cutoff date 2024-01-01" in content
    assert "Deleting 3 ledger entries" in content
