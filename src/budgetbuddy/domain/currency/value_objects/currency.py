"""Currency value object for representing monetary currencies."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# ISO 4217 codes the rate provider is queried for. Closed set.
SUPPORTED_CURRENCIES: tuple[str, ...] = (
    "PHP",
    "EUR",
    "USD",
    "GBP",
    "CAD",
    "CHF",
    "JPY",
    "AUD",
)

# Used when a receipt does not state its currency
DEFAULT_RECEIPT_CURRENCY = "EUR"


def normalize_currency_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def is_supported_currency(code: Optional[str]) -> bool:
    """Check a code against the supported set, case-insensitively."""
    return normalize_currency_code(code) in SUPPORTED_CURRENCIES


class Currency(BaseModel):
    """Value object representing a supported monetary currency."""

    code: str

    model_config = ConfigDict(
        frozen=True,  # Immutable
        str_strip_whitespace=True,  # Auto-strip whitespace
    )

    # overriding pydantic init to allow positional arguments Currency("EUR")
    def __init__(self, code: str | None = None, **data: Any):
        if "code" not in data:
            data["code"] = code
        super().__init__(**data)

    @field_validator("code")
    @classmethod
    def validate_and_normalize_code(cls, v: Any) -> str:
        if not v or len(str(v).strip()) == 0:
            msg = "Currency code cannot be empty"
            raise ValueError(msg)

        normalized_code = normalize_currency_code(str(v))

        if len(normalized_code) != 3 or not normalized_code.isalpha():
            msg = f"Currency code must be 3 letters: {normalized_code}"
            raise ValueError(msg)

        if normalized_code not in SUPPORTED_CURRENCIES:
            msg = (
                f"Unsupported currency code: {normalized_code}. "
                f"Supported: {list(SUPPORTED_CURRENCIES)}"
            )
            raise ValueError(msg)

        return normalized_code

    def __str__(self) -> str:
        return self.code

    def __eq__(self, other) -> bool:
        if isinstance(other, Currency):
            return self.code == other.code
        if isinstance(other, str):
            return self.code == other.upper()
        return False

    def __hash__(self) -> int:
        return hash(self.code)
