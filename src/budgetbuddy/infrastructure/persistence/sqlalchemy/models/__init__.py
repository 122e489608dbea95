"""SQLAlchemy models; importing this package registers every table."""

from budgetbuddy.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)
from budgetbuddy.infrastructure.persistence.sqlalchemy.models.currency import (
    ExchangeRateModel,
)

__all__ = ["Base", "ExchangeRateModel", "TimestampMixin"]
