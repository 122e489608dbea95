"""Currency bounded context: supported codes, directed pairs and rates."""

from budgetbuddy.domain.currency.exceptions import (
    ExchangeRateFetchError,
    UnsupportedCurrencyError,
)
from budgetbuddy.domain.currency.value_objects import (
    DEFAULT_RECEIPT_CURRENCY,
    RATE_FRESHNESS_WINDOW,
    SUPPORTED_CURRENCIES,
    Currency,
    CurrencyPair,
    ExchangeRate,
    is_supported_currency,
    normalize_currency_code,
)

__all__ = [
    "DEFAULT_RECEIPT_CURRENCY",
    "RATE_FRESHNESS_WINDOW",
    "SUPPORTED_CURRENCIES",
    "Currency",
    "CurrencyPair",
    "ExchangeRate",
    "ExchangeRateFetchError",
    "UnsupportedCurrencyError",
    "is_supported_currency",
    "normalize_currency_code",
]
