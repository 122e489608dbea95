"""SQLAlchemy persistence for exchange rates."""

from budgetbuddy.infrastructure.persistence.sqlalchemy.engine import (
    create_engine,
    create_session_maker,
    exchange_rate_repository_scope,
)
from budgetbuddy.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    drop_tables,
)
from budgetbuddy.infrastructure.persistence.sqlalchemy.models import (
    Base,
    ExchangeRateModel,
)
from budgetbuddy.infrastructure.persistence.sqlalchemy.repositories import (
    ExchangeRateRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "ExchangeRateModel",
    "ExchangeRateRepositorySQLAlchemy",
    "create_engine",
    "create_session_maker",
    "create_tables",
    "drop_tables",
    "exchange_rate_repository_scope",
]
