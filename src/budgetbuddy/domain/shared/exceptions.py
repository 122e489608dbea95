"""Domain exception hierarchy and stable error codes.

Hosts embedding the receipt pipeline catch ``DomainException`` once and map
``code`` onto their own error responses.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable, machine-readable error codes. Never rename a value."""

    # Rejected input
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE = "INVALID_DATE"
    INVALID_RECEIPT_UPLOAD = "INVALID_RECEIPT_UPLOAD"

    # Business rules
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    UNSUPPORTED_CURRENCY = "UNSUPPORTED_CURRENCY"

    # Upstream providers
    EXCHANGE_RATE_UNAVAILABLE = "EXCHANGE_RATE_UNAVAILABLE"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all domain-related errors.

    Attributes
    ----------
    message
        Human-readable error message
    code
        Stable error code for programmatic handling
    details
        Extra context for logs
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ValidationError(DomainException):
    """Input that can never be accepted as-is."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class BusinessRuleViolation(DomainException):
    """Well-formed input that breaks a domain rule."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.BUSINESS_RULE_VIOLATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
