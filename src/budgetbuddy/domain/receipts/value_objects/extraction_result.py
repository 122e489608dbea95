"""Structured fields extracted from one receipt image."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from budgetbuddy.domain.currency.value_objects import DEFAULT_RECEIPT_CURRENCY
from budgetbuddy.domain.receipts.value_objects.categories import FALLBACK_CATEGORY
from budgetbuddy.domain.shared.time import (
    RECEIPT_DATE_FORMAT,
    format_receipt_date,
    today_local,
)

MAX_DESCRIPTION_LENGTH = 200
FALLBACK_DESCRIPTION = "Purchase receipt"
NO_TEXT_DESCRIPTION = "No text found in receipt"


@dataclass(frozen=True)
class ExtractionResult:
    """
    Result of running a receipt through recognition and structured extraction.

    Every field has a usable value even when the external services failed;
    ``amount`` is the only field left empty when nothing trustworthy was found.
    Hosts may replace any field with explicit user input before persisting.
    """

    amount: Optional[Decimal]
    currency: Optional[str]
    description: str
    date: str  # DD-MM-YYYY
    raw_text: Optional[str] = None
    category_name: Optional[str] = None
    receipt_image_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.description:
            msg = "ExtractionResult description cannot be empty"
            raise ValueError(msg)
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            msg = (
                f"ExtractionResult description exceeds {MAX_DESCRIPTION_LENGTH} "
                f"characters ({len(self.description)})"
            )
            raise ValueError(msg)

    @classmethod
    def fallback(
        cls,
        raw_text: Optional[str],
        receipt_image_url: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ExtractionResult:
        """Fixed result used whenever structured extraction is not trustworthy."""
        return cls(
            amount=None,
            currency=DEFAULT_RECEIPT_CURRENCY,
            description=FALLBACK_DESCRIPTION,
            date=format_receipt_date(today or today_local()),
            raw_text=raw_text,
            category_name=FALLBACK_CATEGORY,
            receipt_image_url=receipt_image_url,
        )

    @classmethod
    def no_text_found(
        cls,
        receipt_image_url: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ExtractionResult:
        """Result for a receipt on which the recognizer found nothing."""
        return cls(
            amount=None,
            currency=None,
            description=NO_TEXT_DESCRIPTION,
            date=format_receipt_date(today or today_local()),
            raw_text=None,
            category_name=FALLBACK_CATEGORY,
            receipt_image_url=receipt_image_url,
        )

    def with_image_reference(self, receipt_image_url: Optional[str]) -> ExtractionResult:
        return replace(self, receipt_image_url=receipt_image_url)

    @property
    def transaction_date(self) -> Optional[date]:
        """The date field parsed, or None if it is not DD-MM-YYYY."""
        try:
            return datetime.strptime(self.date, RECEIPT_DATE_FORMAT).date()
        except ValueError:
            return None
