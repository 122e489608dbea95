"""SQLAlchemy repository implementations."""

from budgetbuddy.infrastructure.persistence.sqlalchemy.repositories.currency import (
    ExchangeRateRepositorySQLAlchemy,
)

__all__ = ["ExchangeRateRepositorySQLAlchemy"]
