"""Application services."""

from budgetbuddy.application.services.currency_converter import CurrencyConverter
from budgetbuddy.application.services.rate_cache import TieredRateCache
from budgetbuddy.application.services.receipt_pipeline import ReceiptPipeline

__all__ = [
    "CurrencyConverter",
    "ReceiptPipeline",
    "TieredRateCache",
]
