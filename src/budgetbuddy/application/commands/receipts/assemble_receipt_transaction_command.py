"""Assemble a normalized, categorized transaction from a receipt."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from budgetbuddy.domain.currency.exceptions import UnsupportedCurrencyError
from budgetbuddy.domain.currency.value_objects import (
    SUPPORTED_CURRENCIES,
    is_supported_currency,
    normalize_currency_code,
)
from budgetbuddy.domain.receipts.exceptions import InvalidTransactionDateError
from budgetbuddy.domain.receipts.services import reconcile_category
from budgetbuddy.domain.receipts.value_objects import (
    FALLBACK_DESCRIPTION,
    ExtractionResult,
    ReceiptTransactionDraft,
)
from budgetbuddy.domain.shared.time import (
    RECEIPT_DATE_FORMAT,
    format_receipt_date,
    today_local,
)

if TYPE_CHECKING:
    from budgetbuddy.application.services import CurrencyConverter, ReceiptPipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiptOverrides:
    """Values the user typed in; each one wins over the extracted value."""

    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None  # DD-MM-YYYY
    category_name: Optional[str] = None


class AssembleReceiptTransactionCommand:
    """Run a receipt through the pipeline and normalize it for persistence."""

    def __init__(
        self,
        pipeline: ReceiptPipeline,
        converter: CurrencyConverter,
        accounting_currency: str = "PHP",
    ):
        accounting_currency = normalize_currency_code(accounting_currency)
        if not is_supported_currency(accounting_currency):
            raise UnsupportedCurrencyError(accounting_currency, SUPPORTED_CURRENCIES)
        self._pipeline = pipeline
        self._converter = converter
        self._accounting_currency = accounting_currency

    async def execute(
        self,
        category_names: Sequence[str],
        image_url: Optional[str] = None,
        overrides: Optional[ReceiptOverrides] = None,
    ) -> ReceiptTransactionDraft:
        """
        Build a transaction draft from a receipt and/or explicit user input.

        Raises
        ------
        UnsupportedCurrencyError
            If the resulting currency is outside the supported set.
        InvalidTransactionDateError
            If the resulting date is not DD-MM-YYYY.
        """
        overrides = overrides or ReceiptOverrides()
        extraction: Optional[ExtractionResult] = None
        if image_url:
            extraction = await self._pipeline.process(image_url, category_names)

        amount = self._resolve_amount(overrides, extraction)
        currency = self._resolve_currency(overrides, extraction)
        transaction_date = self._resolve_date(overrides, extraction)
        description = (
            overrides.description
            or (extraction.description if extraction else None)
            or FALLBACK_DESCRIPTION
        )
        category_name = reconcile_category(
            overrides.category_name or (extraction.category_name if extraction else None),
            category_names,
        )
        if category_name:
            logger.info("Auto-assigned category: %s", category_name)

        accounting_amount = await self._converter.convert(
            amount,
            currency,
            self._accounting_currency,
        )

        return ReceiptTransactionDraft(
            original_amount=amount,
            original_currency=currency,
            accounting_amount=accounting_amount,
            accounting_currency=self._accounting_currency,
            description=description,
            transaction_date=transaction_date,
            category_name=category_name,
            receipt_image_url=image_url,
            raw_text=extraction.raw_text if extraction else None,
        )

    @staticmethod
    def _resolve_amount(
        overrides: ReceiptOverrides,
        extraction: Optional[ExtractionResult],
    ) -> Decimal:
        if overrides.amount:
            return overrides.amount
        if extraction is not None and extraction.amount is not None:
            return extraction.amount
        return Decimal(0)

    def _resolve_currency(
        self,
        overrides: ReceiptOverrides,
        extraction: Optional[ExtractionResult],
    ) -> str:
        currency = normalize_currency_code(
            overrides.currency
            or (extraction.currency if extraction else None)
            or self._accounting_currency,
        )
        if not is_supported_currency(currency):
            raise UnsupportedCurrencyError(currency, SUPPORTED_CURRENCIES)
        return currency

    @staticmethod
    def _resolve_date(
        overrides: ReceiptOverrides,
        extraction: Optional[ExtractionResult],
    ) -> date:
        value = (
            overrides.date
            or (extraction.date if extraction else None)
            or format_receipt_date(today_local())
        )
        try:
            return datetime.strptime(value.strip(), RECEIPT_DATE_FORMAT).date()
        except ValueError as e:
            logger.error("Failed to parse date: %s", value)
            raise InvalidTransactionDateError(value) from e
