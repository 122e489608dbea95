"""SQLAlchemy implementation of ExchangeRateRepository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from budgetbuddy.domain.currency import CurrencyPair, ExchangeRate
from budgetbuddy.domain.currency.repositories import ExchangeRateRepository
from budgetbuddy.domain.shared.time import ensure_tz_aware
from budgetbuddy.infrastructure.persistence.sqlalchemy.models.currency import (
    ExchangeRateModel,
)


class ExchangeRateRepositorySQLAlchemy(ExchangeRateRepository):
    """SQLAlchemy implementation of ExchangeRateRepository.

    The repository only flushes; committing is left to whoever owns the
    session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_pair(self, pair: CurrencyPair) -> Optional[ExchangeRate]:
        model = await self._find_model(pair)
        if model is None:
            return None
        return self._map_to_domain(model)

    async def upsert(self, rate: ExchangeRate) -> None:
        existing = await self._find_model(rate.pair)

        if existing is not None:
            existing.rate = rate.rate
            existing.last_updated = rate.last_updated
        else:
            self._session.add(self._map_to_model(rate))

        await self._session.flush()

    async def _find_model(self, pair: CurrencyPair) -> Optional[ExchangeRateModel]:
        stmt = select(ExchangeRateModel).where(
            ExchangeRateModel.from_currency == pair.from_currency,
            ExchangeRateModel.to_currency == pair.to_currency,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: ExchangeRateModel) -> ExchangeRate:
        # SQLite hands back naive datetimes even for timezone-aware columns
        return ExchangeRate(
            pair=CurrencyPair(model.from_currency, model.to_currency),
            rate=model.rate,
            last_updated=ensure_tz_aware(model.last_updated),
        )

    def _map_to_model(self, rate: ExchangeRate) -> ExchangeRateModel:
        return ExchangeRateModel(
            from_currency=rate.pair.from_currency,
            to_currency=rate.pair.to_currency,
            rate=rate.rate,
            last_updated=rate.last_updated,
        )
