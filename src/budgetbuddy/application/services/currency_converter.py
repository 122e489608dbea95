"""Best-effort conversion of amounts between supported currencies."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from budgetbuddy.domain.currency.value_objects import (
    is_supported_currency,
    normalize_currency_code,
)

if TYPE_CHECKING:
    from budgetbuddy.application.ports import RateSource

logger = logging.getLogger(__name__)


class CurrencyConverter:
    """
    Convert amounts with rates from a ``RateSource``.

    Conversion never blocks transaction creation: unsupported codes and rate
    failures are logged and the amount is returned unchanged. Callers that
    persist transactions must reject unsupported codes themselves, using
    ``is_valid_currency``.
    """

    def __init__(self, rate_source: RateSource):
        self._rate_source = rate_source

    @staticmethod
    def is_valid_currency(currency: str | None) -> bool:
        return is_supported_currency(currency)

    async def convert(
        self,
        amount: Decimal,
        from_currency: str,
        to_currency: str,
    ) -> Decimal:
        from_code = normalize_currency_code(from_currency)
        to_code = normalize_currency_code(to_currency)

        if from_code == to_code:
            return amount

        if not self.is_valid_currency(from_code) or not self.is_valid_currency(to_code):
            logger.warning(
                "Invalid currency conversion %s -> %s, amount left unchanged",
                from_code,
                to_code,
            )
            return amount

        try:
            rate = await self._rate_source.rate(from_code, to_code)
        except Exception as e:
            logger.error(
                "Conversion error %s -> %s, amount left unchanged: %s",
                from_code,
                to_code,
                e,
            )
            return amount

        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        return amount * rate
