"""Port for live exchange-rate providers."""

from decimal import Decimal
from typing import Protocol


class ExchangeRateProvider(Protocol):
    """Remote source of current exchange rates keyed by base currency."""

    async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
        """
        Fetch the current rate of every quoted currency against ``base_currency``.

        Raises
        ------
        ExchangeRateFetchError
            If the provider is unreachable or answers with something unusable.
        """
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""
        ...
