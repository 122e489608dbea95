"""SQLAlchemy model for the ExchangeRate value object."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from budgetbuddy.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)


class ExchangeRateModel(Base, TimestampMixin):
    """
    One row per directed currency pair.

    Rows are refreshed in place when a rate is re-fetched; staleness is
    decided from ``last_updated`` at read time, rows are never deleted.
    """

    __tablename__ = "exchange_rates"

    __table_args__ = (
        UniqueConstraint(
            "from_currency",
            "to_currency",
            name="uq_exchange_rates_pair",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    to_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(20, 10), nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<ExchangeRateModel({self.from_currency}->{self.to_currency}, "
            f"rate={self.rate}, last_updated={self.last_updated})>"
        )
