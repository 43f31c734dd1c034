"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist (or vanished during a pass)."""


def invalid_cutoff_date(value: str) -> str:
    """Return message for a cutoff date that is not YYYY-MM-DD."""
    return f"Invalid cutoff date '{value}': expected YYYY-MM-DD"


def ledger_entry_not_found(entry_id: int) -> str:
    """Return message for a ledger entry missing during reconciliation."""
    return f"Ledger entry {entry_id} not found"


def line_item_not_found(line_item_id: int) -> str:
    """Return message for a line item missing during reconciliation."""
    return f"Line item {line_item_id} not found"


def missing_database_settings(missing: list[str]) -> str:
    """Return message when neither a URL nor full credentials are configured."""
    return (
        "Missing required database configuration: "
        f"{', '.join(missing)}. Set LEDGERPRUNE_DATABASE_URL or the DB_* variables."
    )


def invalid_database_port(value: str) -> str:
    """Return message for a DB_PORT that is not a number."""
    return f"Invalid database port '{value}': expected a number"
