"""Unit tests for currency codes, pairs and exchange rates."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from budgetbuddy.domain.currency import (
    SUPPORTED_CURRENCIES,
    Currency,
    CurrencyPair,
    ExchangeRate,
    UnsupportedCurrencyError,
    is_supported_currency,
)
from budgetbuddy.domain.shared.exceptions import ErrorCode

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestSupportedCurrencies:
    def test_closed_set(self):
        assert set(SUPPORTED_CURRENCIES) == {
            "PHP", "EUR", "USD", "GBP", "CAD", "CHF", "JPY", "AUD",
        }

    @pytest.mark.parametrize("code", ["usd", " eur ", "PHP"])
    def test_case_insensitive(self, code):
        assert is_supported_currency(code)

    @pytest.mark.parametrize("code", [None, "", "XYZ", "BTC", "EURO"])
    def test_unsupported(self, code):
        assert not is_supported_currency(code)

    def test_currency_value_object(self):
        assert Currency("jpy").code == "JPY"
        assert Currency("EUR") == "eur"
        with pytest.raises(ValueError):
            Currency("XYZ")


class TestCurrencyPair:
    def test_of_normalizes(self):
        pair = CurrencyPair.of("usd", " eur")

        assert pair == CurrencyPair("USD", "EUR")
        assert str(pair) == "USD->EUR"

    def test_directional(self):
        assert CurrencyPair.of("USD", "EUR") != CurrencyPair.of("EUR", "USD")

    def test_unsupported_code(self):
        with pytest.raises(UnsupportedCurrencyError) as exc_info:
            CurrencyPair.of("USD", "XYZ")

        assert exc_info.value.code == ErrorCode.UNSUPPORTED_CURRENCY
        assert exc_info.value.details == {"currency": "XYZ"}

    def test_requires_normalized_codes(self):
        with pytest.raises(ValueError, match="normalized"):
            CurrencyPair("usd", "EUR")

    def test_identity(self):
        assert CurrencyPair.of("EUR", "eur").is_identity
        assert not CurrencyPair.of("EUR", "USD").is_identity

    def test_all_supported(self):
        pairs = list(CurrencyPair.all_supported())

        assert len(pairs) == 8 * 7
        assert len(set(pairs)) == len(pairs)
        assert not any(pair.is_identity for pair in pairs)


class TestExchangeRate:
    def _rate(self, age: timedelta) -> ExchangeRate:
        return ExchangeRate(
            pair=CurrencyPair.of("USD", "EUR"),
            rate=Decimal("0.92"),
            last_updated=NOW - age,
        )

    def test_fresh_inside_window(self):
        assert self._rate(timedelta(minutes=59)).is_fresh(NOW)

    def test_stale_at_exactly_one_hour(self):
        assert not self._rate(timedelta(hours=1)).is_fresh(NOW)

    def test_custom_window(self):
        assert self._rate(timedelta(minutes=10)).is_fresh(NOW, timedelta(minutes=15))
        assert not self._rate(timedelta(minutes=20)).is_fresh(NOW, timedelta(minutes=15))

    def test_naive_timestamp_treated_as_utc(self):
        rate = ExchangeRate(
            pair=CurrencyPair.of("USD", "EUR"),
            rate=Decimal("0.92"),
            last_updated=datetime(2024, 6, 1, 11, 30),
        )

        assert rate.age(NOW) == timedelta(minutes=30)

    @pytest.mark.parametrize("value", [Decimal(0), Decimal("-1")])
    def test_rate_must_be_positive(self, value):
        with pytest.raises(ValueError, match="positive"):
            ExchangeRate(CurrencyPair.of("USD", "EUR"), value, NOW)

    def test_rate_must_be_decimal(self):
        with pytest.raises(TypeError):
            ExchangeRate(CurrencyPair.of("USD", "EUR"), 0.92, NOW)
