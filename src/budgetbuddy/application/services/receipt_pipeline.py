"""Receipt processing pipeline: text recognition, then structured extraction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from budgetbuddy.domain.receipts.value_objects import ExtractionResult

if TYPE_CHECKING:
    from budgetbuddy.domain.receipts.services import (
        StructuredExtractor,
        TextExtractor,
    )
    from budgetbuddy.domain.receipts.value_objects import ReceiptUpload

logger = logging.getLogger(__name__)


class ReceiptPipeline:
    """
    Turn a receipt image into an ``ExtractionResult``.

    Recognition always completes before structured extraction starts. When
    recognition finds no text the structured extractor is not called at all.
    Both extractors absorb their own provider failures; anything else that
    escapes them is unexpected and propagates to the caller.
    """

    def __init__(
        self,
        text_extractor: TextExtractor,
        structured_extractor: StructuredExtractor,
    ):
        self._text_extractor = text_extractor
        self._structured_extractor = structured_extractor

    async def process(
        self,
        image_url: str,
        category_names: Sequence[str],
    ) -> ExtractionResult:
        logger.info("Starting receipt processing for image: %s", image_url)
        try:
            raw_text = await self._text_extractor.extract(image_url)
            return await self._structure(raw_text, category_names, image_url)
        except Exception:
            logger.exception("Receipt processing failed for image: %s", image_url)
            raise

    async def process_upload(
        self,
        upload: ReceiptUpload,
        category_names: Sequence[str],
        receipt_image_url: Optional[str] = None,
    ) -> ExtractionResult:
        """Same as ``process`` for a file the user uploaded directly."""
        logger.info("Starting receipt processing for upload: %s", upload.filename)
        try:
            raw_text = await self._text_extractor.extract_from_upload(upload)
            return await self._structure(raw_text, category_names, receipt_image_url)
        except Exception:
            logger.exception("Receipt processing failed for upload: %s", upload.filename)
            raise

    async def _structure(
        self,
        raw_text: str,
        category_names: Sequence[str],
        receipt_image_url: Optional[str],
    ) -> ExtractionResult:
        if not raw_text or not raw_text.strip():
            logger.warning("No text extracted from image")
            return ExtractionResult.no_text_found(receipt_image_url)

        logger.info("Extracted %d characters from receipt", len(raw_text))
        result = await self._structured_extractor.infer(
            raw_text,
            list(category_names),
            receipt_image_url,
        )
        logger.info(
            "Structured extraction completed - Amount: %s, Currency: %s, Category: %s",
            result.amount,
            result.currency,
            result.category_name,
        )
        return result.with_image_reference(receipt_image_url)
