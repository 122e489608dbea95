"""Currency domain exceptions."""

from typing import Iterable

from budgetbuddy.domain.shared.exceptions import (
    BusinessRuleViolation,
    DomainException,
    ErrorCode,
)


class UnsupportedCurrencyError(BusinessRuleViolation):
    """Raised when a currency code is outside the supported set."""

    def __init__(
        self,
        currency: str | None,
        supported: Iterable[str] = (),
    ) -> None:
        supported = list(supported)
        message = f"Unsupported currency: {currency}."
        if supported:
            message = f"{message} Supported: {', '.join(supported)}"
        super().__init__(
            message=message,
            code=ErrorCode.UNSUPPORTED_CURRENCY,
            details={"currency": currency},
        )


class ExchangeRateFetchError(DomainException):
    """Raised when a live rate cannot be obtained from the rate provider."""

    def __init__(
        self,
        from_currency: str,
        to_currency: str | None,
        reason: str,
    ) -> None:
        super().__init__(
            message=(
                f"Rate not available for {from_currency}->{to_currency or '*'}: "
                f"{reason}"
            ),
            code=ErrorCode.EXCHANGE_RATE_UNAVAILABLE,
            details={
                "from_currency": from_currency,
                "to_currency": to_currency,
                "reason": reason,
            },
        )
