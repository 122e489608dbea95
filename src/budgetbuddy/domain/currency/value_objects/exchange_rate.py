"""Exchange rate value object (one persisted entry per directed pair)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from budgetbuddy.domain.currency.value_objects.currency_pair import CurrencyPair
from budgetbuddy.domain.shared.time import ensure_tz_aware

RATE_FRESHNESS_WINDOW = timedelta(hours=1)


@dataclass(frozen=True)
class ExchangeRate:
    """Price of one unit of ``pair.from_currency`` in ``pair.to_currency``."""

    pair: CurrencyPair
    rate: Decimal
    last_updated: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.rate, Decimal):
            msg = f"Exchange rate must be a Decimal, got {type(self.rate).__name__}"
            raise TypeError(msg)
        if self.rate <= 0:
            msg = f"Exchange rate must be positive, got {self.rate}"
            raise ValueError(msg)

    def age(self, now: datetime) -> timedelta:
        return ensure_tz_aware(now) - ensure_tz_aware(self.last_updated)

    def is_fresh(
        self,
        now: datetime,
        window: timedelta = RATE_FRESHNESS_WINDOW,
    ) -> bool:
        """Fresh iff strictly younger than the freshness window."""
        return self.age(now) < window
