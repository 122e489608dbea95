"""Ports the currency domain expects the infrastructure to implement."""

from budgetbuddy.domain.currency.ports.exchange_rate_provider import (
    ExchangeRateProvider,
)

__all__ = ["ExchangeRateProvider"]
