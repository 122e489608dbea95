"""LLM-backed structured extraction."""

from budgetbuddy.infrastructure.integration.ai.ollama_receipt_extractor import (
    OllamaGenerateResponse,
    OllamaReceiptExtractor,
)

__all__ = ["OllamaGenerateResponse", "OllamaReceiptExtractor"]
