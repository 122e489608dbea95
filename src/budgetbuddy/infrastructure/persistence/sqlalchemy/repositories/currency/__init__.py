"""Currency repository implementations."""

from budgetbuddy.infrastructure.persistence.sqlalchemy.repositories.currency.exchange_rate_repository import (  # NOQA: E501
    ExchangeRateRepositorySQLAlchemy,
)

__all__ = ["ExchangeRateRepositorySQLAlchemy"]
