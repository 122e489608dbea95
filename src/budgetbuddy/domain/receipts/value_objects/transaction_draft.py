"""Normalized transaction record assembled from a receipt."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ReceiptTransactionDraft:
    """
    A categorized expense ready to be persisted by the host application.

    ``original_amount``/``original_currency`` are what the receipt (or the
    user) stated; ``accounting_amount`` is the same value expressed in the
    canonical accounting currency.
    """

    original_amount: Decimal
    original_currency: str
    accounting_amount: Decimal
    accounting_currency: str
    description: str
    transaction_date: date
    category_name: Optional[str] = None
    receipt_image_url: Optional[str] = None
    raw_text: Optional[str] = None

    @property
    def was_converted(self) -> bool:
        return self.original_currency != self.accounting_currency
