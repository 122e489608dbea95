"""Application ports."""

from budgetbuddy.application.ports.rate_source import (
    ExchangeRateRepositoryScope,
    RateSource,
)

__all__ = ["ExchangeRateRepositoryScope", "RateSource"]
