"""Time utilities for the domain layer."""

from datetime import date, datetime, timezone

RECEIPT_DATE_FORMAT = "%d-%m-%Y"


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def today_local() -> date:
    """Return the current date in the process' local timezone."""
    return datetime.now().date()


def format_receipt_date(value: date) -> str:
    """Format a date the way receipts are exchanged (DD-MM-YYYY)."""
    return value.strftime(RECEIPT_DATE_FORMAT)


def ensure_tz_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC if naive)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
