"""Ollama-based structured extraction of receipt fields.

The recognized receipt text is sent to an Ollama ``/api/generate`` endpoint
together with the caller's category names. The model answers with a JSON
object (amount, currency, description, date, categoryName) which is decoded
and defaulted by the receipt domain services. Every transport or decoding
problem degrades to ``ExtractionResult.fallback``.
"""

import json
import logging
from datetime import date
from typing import Optional, Sequence

import httpx
from pydantic import BaseModel, ValidationError

from budgetbuddy.domain.receipts.services import (
    ExtractionFallback,
    ReceiptDecoding,
    StructuredExtractor,
    decode_receipt_payload,
    resolve_extraction,
)
from budgetbuddy.domain.receipts.value_objects import ExtractionResult

logger = logging.getLogger(__name__)


class OllamaGenerateResponse(BaseModel):
    """The part of the non-streaming ``/api/generate`` envelope we read."""

    model: Optional[str] = None
    response: Optional[str] = None
    done: Optional[bool] = None


class OllamaReceiptExtractor(StructuredExtractor):
    """
    Structured extractor using Ollama for LLM inference.

    One pooled ``httpx.AsyncClient`` is created on first use and reused
    until ``aclose()``.
    """

    DEFAULT_PROMPT_TEMPLATE = """Analyze this receipt text and extract the following fields.
Return ONLY valid JSON with no extra text.

RECEIPT TEXT:
{raw_text}

AVAILABLE CATEGORIES:
{categories_json}

REQUIRED FORMAT (exact JSON structure):
{{
  "amount": <number or null>,
  "currency": "<3-letter code or null>",
  "description": "<store name or main item>",
  "date": "DD-MM-YYYY or null",
  "categoryName": "<exact match from available categories>"
}}

RULES:
- amount: Total amount paid as a number (e.g., 8.10). Use dot for decimals. Return null if not found.
- currency: 3-letter ISO code (USD, EUR, GBP, etc.). Return null if not found.
- description: Concise description of the purchase (store name or main items). Max 200 chars. Never null.
- date: Transaction date in DD-MM-YYYY format. Return null if not found.
- categoryName: Choose the MOST appropriate category from the available list based on the receipt context.
  * For restaurants, fast food, cafes, groceries -> "Food & Dining"
  * For Uber, taxis, gas, parking -> "Transportation"
  * For clothing, electronics, general shopping -> "Shopping"
  * For movies, games, subscriptions -> "Entertainment"
  * For doctor, pharmacy, medical -> "Healthcare"
  * For rent, mortgage -> "Housing"
  * For electricity, water, internet -> "Utilities"
  * For books, courses, tuition -> "Education"
  * For hotels, flights, tourism -> "Travel"
  * For haircut, cosmetics, gym -> "Personal Care"
  * For charity, presents -> "Gifts & Donations"
  * For anything unclear -> "Miscellaneous"

  IMPORTANT: Return the EXACT category name from the available list. If no match, return "Miscellaneous".

CRITICAL: Return ONLY the JSON object. No markdown, no explanation, no extra text.
"""  # NOQA: E501

    def __init__(
        self,
        model: str = "gpt-oss:120b-cloud",
        base_url: str = "http://localhost:11434",
        temperature: float = 0.1,
        timeout: float = 120.0,
        prompt_template: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._timeout = timeout
        self._prompt_template = prompt_template or self.DEFAULT_PROMPT_TEMPLATE
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def model_name(self) -> str:
        return self._model

    async def infer(
        self,
        raw_text: str,
        available_categories: Sequence[str],
        image_url: Optional[str] = None,
    ) -> ExtractionResult:
        prompt = self._build_prompt(raw_text, available_categories)
        logger.debug("AI Prompt:\n%s", prompt)

        try:
            response = await self._post_generate(prompt)
        except httpx.HTTPError as e:
            self._log_inference_error(e)
            return ExtractionResult.fallback(raw_text, image_url)

        return self.decode_response(
            response.status_code,
            response.text,
            raw_text,
            image_url,
        )

    def decode_response(
        self,
        status_code: int,
        body: str,
        raw_text: str,
        image_url: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ExtractionResult:
        """
        Turn an ``/api/generate`` answer into an extraction result.

        Pure apart from logging, so it can be exercised without a server.

        Parameters
        ----------
        status_code
            HTTP status of the inference call
        body
            Raw response body
        raw_text
            Recognized receipt text the prompt was built from
        image_url
            Reference of the source image
        today
            Date used when neither the model nor the text yields one

        Returns
        -------
        ExtractionResult, falling back on any error
        """
        decoding = self._decode_envelope(status_code, body)
        if isinstance(decoding, ExtractionFallback):
            logger.error("Ollama answer unusable: %s", decoding.reason)
        return resolve_extraction(decoding, raw_text, image_url, today)

    def _decode_envelope(self, status_code: int, body: str) -> ReceiptDecoding:
        if not 200 <= status_code < 300:
            return ExtractionFallback(f"Ollama API error: HTTP {status_code}")

        logger.info("Ollama raw response: %s", body)
        try:
            envelope = OllamaGenerateResponse.model_validate_json(body.strip())
        except ValidationError as e:
            return ExtractionFallback(
                f"invalid envelope ({e.error_count()} validation errors)",
            )

        return decode_receipt_payload(envelope.response)

    def _build_prompt(self, raw_text: str, categories: Sequence[str]) -> str:
        return self._prompt_template.format(
            raw_text=raw_text,
            categories_json=json.dumps(list(categories), ensure_ascii=False),
        )

    async def _post_generate(self, prompt: str) -> httpx.Response:
        payload = {
            "model": self._model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self._temperature,
            },
        }
        return await self._get_client().post(
            f"{self._base_url}/api/generate",
            json=payload,
        )

    def _log_inference_error(self, e: httpx.HTTPError) -> None:
        if isinstance(e, httpx.TimeoutException):
            logger.error("Ollama request timed out after %.1fs", self._timeout)
        elif isinstance(e, httpx.ConnectError):
            logger.error(
                "Could not connect to Ollama at %s. Is it running?",
                self._base_url,
            )
        else:
            logger.error(
                "Ollama processing error: %s (type: %s)",
                str(e) or repr(e),
                type(e).__name__,
            )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # Allow extra time for model loading (cold start)
            timeout = httpx.Timeout(
                connect=5.0,
                read=self._timeout,
                write=10.0,
                pool=5.0,
            )
            self._client = httpx.AsyncClient(
                timeout=timeout,
                transport=self._transport,
            )
        return self._client

    async def health_check(self) -> bool:
        """Check that Ollama answers and lists the configured model."""
        try:
            response = await self._get_client().get(f"{self._base_url}/api/tags")
        except httpx.HTTPError as e:
            logger.debug("Ollama health check failed: %s", str(e))
            return False

        if response.status_code != 200:
            return False

        try:
            models = [m.get("name", "") for m in response.json().get("models", [])]
        except (ValueError, AttributeError):
            logger.debug("Ollama health check returned an unexpected body")
            return False

        if self._model not in models:
            logger.warning(
                "Model '%s' not found in Ollama. Available: %s",
                self._model,
                models,
            )
            return False
        return True

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
