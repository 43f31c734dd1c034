"""Cleanup configuration.

The configuration is built once (by the CLI or by a caller) and handed to the
engine. Nothing below ``ledgerprune.domain`` reads process environment.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Mapping, Optional

from sqlalchemy.engine import URL, make_url

from ledgerprune.domain.errors import (
    ValidationError,
    invalid_database_port,
    missing_database_settings,
)
from ledgerprune.utils.date_parser import parse_cutoff_date

# Only ledger entries of this account class take part in reconciliation.
LEDGER_ACCOUNT_CLASS = 2

# Line items at or below this quantity are deleted rather than updated.
QUANTITY_EPSILON = 0.001

# Identifier lists are deleted in chunks of this size.
DELETE_BATCH_SIZE = 1000

POSITIVE_BALANCE_PREVIEW = 10

DEFAULT_CUTOFF_DATE = "2024-01-01"
DEFAULT_MYSQL_PORT = "3306"

_TRUTHY = {"1", "true", "yes", "on"}


def default_log_file(now: Optional[datetime] = None) -> str:
    """Return a timestamped log file name like cleanup_20240101_120000.log."""
    now = now or datetime.now()
    return f"cleanup_{now.strftime('%Y%m%d_%H%M%S')}.log"


def default_isolation_level(database_url: str) -> str:
    """Pick the isolation level for a pass transaction.

    Reconciliation re-reads rows that were already read during planning, so
    the pass needs at least repeatable reads. SQLite only offers SERIALIZABLE
    (its default) and READ UNCOMMITTED.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return "SERIALIZABLE"
    return "REPEATABLE READ"


@dataclass(frozen=True)
class CleanupConfig:
    """Settings for one cleanup run."""

    database_url: str
    cutoff_date: date = date.fromisoformat(DEFAULT_CUTOFF_DATE)
    dry_run: bool = False
    log_file: Optional[str] = None
    batch_size: int = DELETE_BATCH_SIZE
    isolation_level: Optional[str] = None

    def __post_init__(self):
        if self.batch_size <= 0:
            raise ValidationError(f"Batch size must be positive, got {self.batch_size}")

    @property
    def effective_isolation_level(self) -> str:
        return self.isolation_level or default_isolation_level(self.database_url)

    def with_overrides(self, **changes) -> "CleanupConfig":
        """Return a copy with the given fields replaced (None values are ignored)."""
        changes = {key: value for key, value in changes.items() if value is not None}
        if "cutoff_date" in changes:
            changes["cutoff_date"] = parse_cutoff_date(changes["cutoff_date"])
        return replace(self, **changes)


def build_database_url(
    host: str, port: str, user: str, password: str, name: str, drivername: str = "mysql+pymysql"
) -> str:
    """Build a database URL from individual connection settings.

    Raises:
        ValidationError: If the port is not a number
    """
    try:
        port_number = int(port)
    except (TypeError, ValueError) as e:
        raise ValidationError(invalid_database_port(port)) from e
    url = URL.create(
        drivername=drivername,
        username=user,
        password=password,
        host=host,
        port=port_number,
        database=name,
    )
    return url.render_as_string(hide_password=False)


def _setting(environ: Mapping[str, str], name: str) -> str:
    """Return the first non-empty value of LEDGERPRUNE_<name> and <name>."""
    for key in (f"LEDGERPRUNE_{name}", name):
        value = (environ.get(key) or "").strip()
        if value:
            return value
    return ""


def resolve_database_url(environ: Mapping[str, str]) -> str:
    """Return LEDGERPRUNE_DATABASE_URL, or a URL built from the DB_* variables.

    Raises:
        ValidationError: If neither a URL nor complete credentials are present
            or DB_PORT is not a number
    """
    url = environ.get("LEDGERPRUNE_DATABASE_URL", "").strip()
    if url:
        return url

    required = {key: environ.get(key, "").strip() for key in ("DB_USER", "DB_PASSWORD", "DB_NAME")}
    missing = [key for key, value in required.items() if not value]
    if missing:
        raise ValidationError(missing_database_settings(missing))

    return build_database_url(
        host=environ.get("DB_HOST", "").strip() or "localhost",
        port=environ.get("DB_PORT", "").strip() or DEFAULT_MYSQL_PORT,
        user=required["DB_USER"],
        password=required["DB_PASSWORD"],
        name=required["DB_NAME"],
    )


def load_config(environ: Mapping[str, str]) -> CleanupConfig:
    """Build a CleanupConfig from an environment mapping.

    Each setting is read from its LEDGERPRUNE_ name first, then from the bare
    name (CUTOFF_DATE, DRY_RUN, LOG_FILE) used by older .env files.

    Args:
        environ: Mapping of variable names to values (usually os.environ
            after a .env file was loaded)

    Returns:
        CleanupConfig

    Raises:
        ValidationError: If database settings are missing, the port is not a
            number or the cutoff date is malformed
    """
    return CleanupConfig(
        database_url=resolve_database_url(environ),
        cutoff_date=parse_cutoff_date(_setting(environ, "CUTOFF_DATE") or DEFAULT_CUTOFF_DATE),
        dry_run=_setting(environ, "DRY_RUN").lower() in _TRUTHY,
        log_file=_setting(environ, "LOG_FILE") or default_log_file(),
        isolation_level=environ.get("LEDGERPRUNE_ISOLATION_LEVEL") or None,
    )
