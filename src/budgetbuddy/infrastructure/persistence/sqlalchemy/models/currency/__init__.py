"""Currency SQLAlchemy models."""

from budgetbuddy.infrastructure.persistence.sqlalchemy.models.currency.exchange_rate_model import (  # NOQA: E501
    ExchangeRateModel,
)

__all__ = ["ExchangeRateModel"]
