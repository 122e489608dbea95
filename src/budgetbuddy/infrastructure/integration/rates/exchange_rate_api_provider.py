"""Live exchange rates from exchangerate-api.com."""

import json
import logging
from decimal import Decimal
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from budgetbuddy.domain.currency import ExchangeRateFetchError

logger = logging.getLogger(__name__)


class ExchangeRateApiResponse(BaseModel):
    """``/v4/latest/{base}`` answer; only the rate map is needed."""

    model_config = ConfigDict(extra="ignore")

    base: Optional[str] = None
    rates: dict[str, Decimal]


class ExchangeRateApiProvider:
    """
    Exchange-rate provider for the public exchangerate-api.com v4 endpoint.

    One GET per base currency returns the rate of every quoted currency.
    Numbers are decoded straight into ``Decimal``.
    """

    def __init__(
        self,
        base_url: str = "https://api.exchangerate-api.com/v4/latest",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
        url = f"{self._base_url}/{base_currency}"
        logger.debug("Fetching exchange rates from %s", url)

        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise ExchangeRateFetchError(
                base_currency,
                None,
                f"request failed: {str(e) or type(e).__name__}",
            ) from e

        if not response.is_success:
            raise ExchangeRateFetchError(
                base_currency,
                None,
                f"HTTP {response.status_code}",
            )

        return self.parse_rates(base_currency, response.text)

    def parse_rates(self, base_currency: str, body: str) -> dict[str, Decimal]:
        """
        Decode the rate map of a provider answer.

        Raises
        ------
        ExchangeRateFetchError
            If the body is not JSON or carries no usable ``rates`` object.
        """
        try:
            data = json.loads(body, parse_float=Decimal)
            parsed = ExchangeRateApiResponse.model_validate(data)
        except json.JSONDecodeError as e:
            raise ExchangeRateFetchError(
                base_currency,
                None,
                f"response is not valid JSON: {e.msg}",
            ) from e
        except RecursionError as e:
            raise ExchangeRateFetchError(
                base_currency,
                None,
                "response is nested too deeply",
            ) from e
        except ValidationError as e:
            raise ExchangeRateFetchError(
                base_currency,
                None,
                f"unexpected response shape ({e.error_count()} validation errors)",
            ) from e

        return {code.upper(): rate for code, rate in parsed.rates.items()}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=5.0),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
