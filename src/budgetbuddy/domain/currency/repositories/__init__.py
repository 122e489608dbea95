"""Currency repository interfaces."""

from budgetbuddy.domain.currency.repositories.exchange_rate_repository import (
    ExchangeRateRepository,
)

__all__ = ["ExchangeRateRepository"]
