"""Directed currency pair value object."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import permutations
from typing import Iterator

from budgetbuddy.domain.currency.exceptions import UnsupportedCurrencyError
from budgetbuddy.domain.currency.value_objects.currency import (
    SUPPORTED_CURRENCIES,
    is_supported_currency,
    normalize_currency_code,
)


@dataclass(frozen=True)
class CurrencyPair:
    """
    An ordered (from, to) pair of supported currency codes.

    Pairs are directional: USD->EUR and EUR->USD are independent entries,
    never derived from one another.
    """

    from_currency: str
    to_currency: str

    def __post_init__(self) -> None:
        for code in (self.from_currency, self.to_currency):
            if code != normalize_currency_code(code):
                msg = f"Currency codes must be normalized, got {code!r}"
                raise ValueError(msg)
            if not is_supported_currency(code):
                raise UnsupportedCurrencyError(code, SUPPORTED_CURRENCIES)

    @classmethod
    def of(cls, from_currency: str, to_currency: str) -> CurrencyPair:
        """Build a pair from raw codes, upper-casing them first."""
        return cls(
            from_currency=normalize_currency_code(from_currency),
            to_currency=normalize_currency_code(to_currency),
        )

    @classmethod
    def all_supported(cls) -> Iterator[CurrencyPair]:
        """Every ordered pair of distinct supported currencies."""
        for from_code, to_code in permutations(SUPPORTED_CURRENCIES, 2):
            yield cls(from_code, to_code)

    @property
    def is_identity(self) -> bool:
        return self.from_currency == self.to_currency

    def __str__(self) -> str:
        return f"{self.from_currency}->{self.to_currency}"
