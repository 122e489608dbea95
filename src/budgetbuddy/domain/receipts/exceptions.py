"""Receipt domain exceptions."""

from budgetbuddy.domain.shared.exceptions import ErrorCode, ValidationError


class InvalidReceiptUploadError(ValidationError):
    """Raised when an uploaded receipt file cannot be sent for recognition."""

    def __init__(self, reason: str, filename: str | None = None) -> None:
        super().__init__(
            message=f"Receipt upload rejected: {reason}",
            code=ErrorCode.INVALID_RECEIPT_UPLOAD,
            details={"filename": filename, "reason": reason},
        )


class InvalidTransactionDateError(ValidationError):
    """Raised when a transaction date is not in DD-MM-YYYY format."""

    def __init__(self, value: str | None) -> None:
        super().__init__(
            message="Invalid date format. Use DD-MM-YYYY",
            code=ErrorCode.INVALID_DATE,
            details={"value": value},
        )
