"""Exchange-rate providers."""

from budgetbuddy.infrastructure.integration.rates.exchange_rate_api_provider import (
    ExchangeRateApiProvider,
    ExchangeRateApiResponse,
)

__all__ = ["ExchangeRateApiProvider", "ExchangeRateApiResponse"]
