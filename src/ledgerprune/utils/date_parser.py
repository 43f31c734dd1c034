"""Date parsing utilities."""

import re
from datetime import date, datetime

from ledgerprune.domain.errors import ValidationError, invalid_cutoff_date

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_cutoff_date(value: str | date) -> date:
    """Parse a cutoff date.

    Only the ISO calendar form YYYY-MM-DD is accepted. The cutoff is an
    inclusive upper bound, so a loosely parsed value could silently widen the
    set of deleted records.

    Args:
        value: Date string, or an already parsed date

    Returns:
        Date object

    Raises:
        ValidationError: If the value is not a valid YYYY-MM-DD date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = value.strip() if isinstance(value, str) else ""
    if not _ISO_DATE.match(text):
        raise ValidationError(invalid_cutoff_date(str(value)))

    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"{invalid_cutoff_date(text)} ({e})") from e
