"""Exchange-rate lookup port for the application layer."""

from contextlib import AbstractAsyncContextManager
from decimal import Decimal
from typing import Callable, Protocol

from budgetbuddy.domain.currency.repositories import ExchangeRateRepository

# Opens a unit of work on the durable rate store and commits on clean exit
ExchangeRateRepositoryScope = Callable[
    [],
    AbstractAsyncContextManager[ExchangeRateRepository],
]


class RateSource(Protocol):
    """Anything that can answer the current rate for a directed pair."""

    async def rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Rate converting one unit of ``from_currency`` into ``to_currency``.

        Raises
        ------
        UnsupportedCurrencyError
            If either code is outside the supported set.
        ExchangeRateFetchError
            If no fresh rate is stored and the live provider fails.
        """
        ...
