"""Repository interface for persisted exchange rates."""

from abc import ABC, abstractmethod
from typing import Optional

from budgetbuddy.domain.currency.value_objects import CurrencyPair, ExchangeRate


class ExchangeRateRepository(ABC):
    """Durable store holding at most one exchange rate per directed pair."""

    @abstractmethod
    async def find_by_pair(self, pair: CurrencyPair) -> Optional[ExchangeRate]:
        """
        Find the stored rate for a directed pair, fresh or not.

        Parameters
        ----------
        pair
            Directed currency pair to look up

        Returns
        -------
        Stored exchange rate if one exists, None otherwise
        """

    @abstractmethod
    async def upsert(self, rate: ExchangeRate) -> None:
        """
        Insert the rate or overwrite the existing entry for its pair.

        Parameters
        ----------
        rate
            Exchange rate to store
        """
