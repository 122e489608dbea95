"""Optical character recognition adapters."""

from budgetbuddy.infrastructure.integration.ocr.ocr_space_text_extractor import (
    OcrSpaceResponse,
    OcrSpaceTextExtractor,
)

__all__ = ["OcrSpaceResponse", "OcrSpaceTextExtractor"]
