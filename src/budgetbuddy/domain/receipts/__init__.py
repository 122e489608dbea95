"""Receipt bounded context: extraction results and the extraction ports."""

from budgetbuddy.domain.receipts.exceptions import (
    InvalidReceiptUploadError,
    InvalidTransactionDateError,
)
from budgetbuddy.domain.receipts.value_objects import (
    DEFAULT_CATEGORY_NAMES,
    FALLBACK_CATEGORY,
    ExtractionResult,
    ReceiptTransactionDraft,
    ReceiptUpload,
)

__all__ = [
    "DEFAULT_CATEGORY_NAMES",
    "FALLBACK_CATEGORY",
    "ExtractionResult",
    "InvalidReceiptUploadError",
    "InvalidTransactionDateError",
    "ReceiptTransactionDraft",
    "ReceiptUpload",
]
