"""Shared domain building blocks."""

from budgetbuddy.domain.shared.exceptions import (
    BusinessRuleViolation,
    DomainException,
    ErrorCode,
    ValidationError,
)
from budgetbuddy.domain.shared.time import (
    ensure_tz_aware,
    format_receipt_date,
    today_local,
    utc_now,
)

__all__ = [
    "BusinessRuleViolation",
    "DomainException",
    "ErrorCode",
    "ValidationError",
    "ensure_tz_aware",
    "format_receipt_date",
    "today_local",
    "utc_now",
]
