"""Currency value objects."""

from budgetbuddy.domain.currency.value_objects.currency import (
    DEFAULT_RECEIPT_CURRENCY,
    SUPPORTED_CURRENCIES,
    Currency,
    is_supported_currency,
    normalize_currency_code,
)
from budgetbuddy.domain.currency.value_objects.currency_pair import CurrencyPair
from budgetbuddy.domain.currency.value_objects.exchange_rate import (
    RATE_FRESHNESS_WINDOW,
    ExchangeRate,
)

__all__ = [
    "DEFAULT_RECEIPT_CURRENCY",
    "RATE_FRESHNESS_WINDOW",
    "SUPPORTED_CURRENCIES",
    "Currency",
    "CurrencyPair",
    "ExchangeRate",
    "is_supported_currency",
    "normalize_currency_code",
]
