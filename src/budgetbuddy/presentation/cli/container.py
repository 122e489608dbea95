"""Process-wide wiring of the receipt pipeline and the rate cache."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from budgetbuddy.application.commands import AssembleReceiptTransactionCommand
from budgetbuddy.application.services import (
    CurrencyConverter,
    ReceiptPipeline,
    TieredRateCache,
)
from budgetbuddy.infrastructure.integration.ai import OllamaReceiptExtractor
from budgetbuddy.infrastructure.integration.ocr import OcrSpaceTextExtractor
from budgetbuddy.infrastructure.integration.rates import ExchangeRateApiProvider
from budgetbuddy.infrastructure.persistence.sqlalchemy import (
    create_engine,
    create_session_maker,
    create_tables,
    exchange_rate_repository_scope,
)
from budgetbuddy_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """A component was requested whose settings are missing."""


class AppContainer:
    """
    Owns the long-lived components of one process.

    The rate cache and the converter exist from the start; the receipt
    pipeline is built on first use because it needs an OCR.space key.
    Call ``aclose()`` once at shutdown.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine = create_engine(
            self.settings.database_url,
            echo=self.settings.database_echo,
        )
        self._session_maker = create_session_maker(self.engine)
        self.rate_cache = TieredRateCache(
            repository_scope=exchange_rate_repository_scope(self._session_maker),
            provider=ExchangeRateApiProvider(
                base_url=self.settings.exchange_rate_api_url,
                timeout=self.settings.exchange_rate_timeout,
            ),
            freshness_window=timedelta(minutes=self.settings.exchange_rate_ttl_minutes),
        )
        self.converter = CurrencyConverter(self.rate_cache)
        self._text_extractor: Optional[OcrSpaceTextExtractor] = None
        self._structured_extractor: Optional[OllamaReceiptExtractor] = None
        self._pipeline: Optional[ReceiptPipeline] = None

    @property
    def pipeline(self) -> ReceiptPipeline:
        if self._pipeline is None:
            api_key = self.settings.ocr_space_api_key
            if api_key is None or not api_key.get_secret_value():
                msg = "OCR_SPACE_API_KEY is not set; receipt scanning is unavailable"
                raise ConfigurationError(msg)

            self._text_extractor = OcrSpaceTextExtractor(
                api_key=api_key.get_secret_value(),
                url=self.settings.ocr_space_url,
                language=self.settings.ocr_space_language,
                engine=self.settings.ocr_space_engine,
                timeout=self.settings.ocr_timeout,
            )
            self._structured_extractor = OllamaReceiptExtractor(
                model=self.settings.ollama_model,
                base_url=self.settings.ollama_base_url,
                temperature=self.settings.ollama_temperature,
                timeout=self.settings.ollama_timeout,
            )
            self._pipeline = ReceiptPipeline(
                self._text_extractor,
                self._structured_extractor,
            )
        return self._pipeline

    def assemble_receipt_transaction(self) -> AssembleReceiptTransactionCommand:
        return AssembleReceiptTransactionCommand(
            pipeline=self.pipeline,
            converter=self.converter,
            accounting_currency=self.settings.accounting_currency,
        )

    async def start(self) -> None:
        """Make sure the rate table exists before the first lookup."""
        await create_tables(self.engine)

    async def aclose(self) -> None:
        await self.rate_cache.aclose()
        if self._text_extractor is not None:
            await self._text_extractor.aclose()
        if self._structured_extractor is not None:
            await self._structured_extractor.aclose()
        await self.engine.dispose()
        logger.debug("Application container closed")
