"""Receipt value objects."""

from budgetbuddy.domain.receipts.value_objects.categories import (
    DEFAULT_CATEGORY_NAMES,
    FALLBACK_CATEGORY,
)
from budgetbuddy.domain.receipts.value_objects.extraction_result import (
    FALLBACK_DESCRIPTION,
    MAX_DESCRIPTION_LENGTH,
    NO_TEXT_DESCRIPTION,
    ExtractionResult,
)
from budgetbuddy.domain.receipts.value_objects.receipt_upload import (
    ALLOWED_CONTENT_TYPES,
    MAX_UPLOAD_BYTES,
    ReceiptUpload,
)
from budgetbuddy.domain.receipts.value_objects.transaction_draft import (
    ReceiptTransactionDraft,
)

__all__ = [
    "ALLOWED_CONTENT_TYPES",
    "DEFAULT_CATEGORY_NAMES",
    "FALLBACK_CATEGORY",
    "FALLBACK_DESCRIPTION",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_UPLOAD_BYTES",
    "NO_TEXT_DESCRIPTION",
    "ExtractionResult",
    "ReceiptTransactionDraft",
    "ReceiptUpload",
]
