"""Receipt domain services and ports."""

from budgetbuddy.domain.receipts.services.category_reconciliation import (
    reconcile_category,
)
from budgetbuddy.domain.receipts.services.receipt_date_parser import (
    expand_two_digit_year,
    find_receipt_date,
)
from budgetbuddy.domain.receipts.services.receipt_payload_decoder import (
    ExtractionFallback,
    ParsedReceipt,
    ReceiptDecoding,
    decode_receipt_payload,
    resolve_extraction,
)
from budgetbuddy.domain.receipts.services.structured_extractor import (
    StructuredExtractor,
)
from budgetbuddy.domain.receipts.services.text_extractor import TextExtractor

__all__ = [
    "ExtractionFallback",
    "ParsedReceipt",
    "ReceiptDecoding",
    "StructuredExtractor",
    "TextExtractor",
    "decode_receipt_payload",
    "expand_two_digit_year",
    "find_receipt_date",
    "reconcile_category",
    "resolve_extraction",
]
