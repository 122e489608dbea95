"""Tiered exchange-rate cache: memory, then durable store, then live provider."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional

from budgetbuddy.domain.currency.exceptions import ExchangeRateFetchError
from budgetbuddy.domain.currency.value_objects import (
    RATE_FRESHNESS_WINDOW,
    CurrencyPair,
    ExchangeRate,
)
from budgetbuddy.domain.shared.time import utc_now

if TYPE_CHECKING:
    from budgetbuddy.application.ports import ExchangeRateRepositoryScope
    from budgetbuddy.domain.currency.ports import ExchangeRateProvider

logger = logging.getLogger(__name__)

IDENTITY_RATE = Decimal(1)


@dataclass(frozen=True)
class _MemoryEntry:
    rate: Decimal
    expires_at: datetime


class TieredRateCache:
    """
    Process-wide exchange-rate cache with single-flight external fetches.

    Lookup order per directed pair:

    1. memory, valid until one freshness window after insertion;
    2. the durable store, used if its entry is younger than the window;
    3. the live provider, whose answer is upserted into the store and
       remembered in memory before it is returned.

    Concurrent misses for the same pair share one in-flight load, and
    concurrent provider requests for the same base currency share one
    call. Stores for a pair never overlap. Pairs with different base
    currencies never wait on each other.

    Construct once at process start and ``aclose()`` at shutdown.
    """

    def __init__(
        self,
        repository_scope: ExchangeRateRepositoryScope,
        provider: ExchangeRateProvider,
        freshness_window: timedelta = RATE_FRESHNESS_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repository_scope = repository_scope
        self._provider = provider
        self._freshness_window = freshness_window
        self._clock = clock
        self._memory: dict[CurrencyPair, _MemoryEntry] = {}
        self._in_flight: dict[CurrencyPair, asyncio.Task[Decimal]] = {}
        self._quote_fetches: dict[str, asyncio.Task[dict[str, Decimal]]] = {}

    @property
    def freshness_window(self) -> timedelta:
        return self._freshness_window

    async def rate(self, from_currency: str, to_currency: str) -> Decimal:
        pair = CurrencyPair.of(from_currency, to_currency)
        if pair.is_identity:
            return IDENTITY_RATE

        cached = self._from_memory(pair)
        if cached is not None:
            logger.debug("Using cached rate %s: %s", pair, cached)
            return cached

        task = self._in_flight.get(pair)
        if task is None:
            task = self._track(self._in_flight, pair, self._load(pair))

        # A cancelled caller must not cancel the load other callers wait on
        return await asyncio.shield(task)

    async def refresh_all(self) -> int:
        """
        Re-fetch and store every ordered pair of distinct supported currencies.

        Each base currency is requested from the provider once, sharing a
        request that a concurrent lookup already has open. Each pair is
        stored only after any load already running for it has finished, and
        lookups arriving meanwhile wait for the refreshed rate. A failing
        pair is logged and skipped.

        Returns
        -------
        Number of pairs refreshed
        """
        logger.info("Updating all exchange rates...")
        quotes: dict[str, dict[str, Decimal]] = {}
        refreshed = 0

        for pair in CurrencyPair.all_supported():
            try:
                if pair.from_currency not in quotes:
                    quotes[pair.from_currency] = await self._fetch_quotes(
                        pair.from_currency,
                    )
                await self._refresh_pair(pair, quotes[pair.from_currency])
                refreshed += 1
            except Exception as e:
                logger.error("Failed to update %s: %s", pair, e)

        logger.info("Exchange rates updated (%d pairs)", refreshed)
        return refreshed

    def invalidate(self, pair: Optional[CurrencyPair] = None) -> None:
        """Drop one pair, or every pair, from the memory tier."""
        if pair is None:
            self._memory.clear()
        else:
            self._memory.pop(pair, None)

    async def aclose(self) -> None:
        for task in [*self._in_flight.values(), *self._quote_fetches.values()]:
            task.cancel()
        self._in_flight.clear()
        self._quote_fetches.clear()
        self._memory.clear()
        await self._provider.aclose()

    def _from_memory(self, pair: CurrencyPair) -> Optional[Decimal]:
        entry = self._memory.get(pair)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._memory[pair]
            return None
        return entry.rate

    def _remember(self, pair: CurrencyPair, rate: Decimal) -> None:
        self._memory[pair] = _MemoryEntry(
            rate=rate,
            expires_at=self._clock() + self._freshness_window,
        )

    def _track(self, registry: dict, key, coro) -> asyncio.Task:
        """Start ``coro`` as the shared task for ``key`` until it finishes."""
        task = asyncio.create_task(coro)
        registry[key] = task

        def _done(finished: asyncio.Task) -> None:
            if registry.get(key) is finished:
                del registry[key]
            # Mark the outcome as retrieved even if every waiter went away
            if not finished.cancelled():
                finished.exception()

        task.add_done_callback(_done)
        return task

    async def _fetch_quotes(self, base_currency: str) -> dict[str, Decimal]:
        task = self._quote_fetches.get(base_currency)
        if task is None:
            task = self._track(
                self._quote_fetches,
                base_currency,
                self._provider.fetch_rates(base_currency),
            )
        return await asyncio.shield(task)

    async def _refresh_pair(
        self,
        pair: CurrencyPair,
        quotes: dict[str, Decimal],
    ) -> Decimal:
        # No await between the last check and registering, so nothing
        # can slip in and store this pair after the refresh does
        while (running := self._in_flight.get(pair)) is not None:
            await asyncio.wait([running])
        task = self._track(self._in_flight, pair, self._store_quote(pair, quotes))
        return await asyncio.shield(task)

    async def _store_quote(
        self,
        pair: CurrencyPair,
        quotes: dict[str, Decimal],
    ) -> Decimal:
        rate = self._pick_rate(pair, quotes)
        await self._store(pair, rate)
        return rate

    async def _load(self, pair: CurrencyPair) -> Decimal:
        async with self._repository_scope() as repository:
            stored = await repository.find_by_pair(pair)

        if stored is not None and stored.is_fresh(
            self._clock(),
            self._freshness_window,
        ):
            logger.debug("Using stored rate %s: %s", pair, stored.rate)
            self._remember(pair, stored.rate)
            return stored.rate

        quotes = await self._fetch_quotes(pair.from_currency)
        return await self._store_quote(pair, quotes)

    def _pick_rate(self, pair: CurrencyPair, quotes: dict[str, Decimal]) -> Decimal:
        rate = quotes.get(pair.to_currency)
        if rate is None:
            raise ExchangeRateFetchError(
                pair.from_currency,
                pair.to_currency,
                "currency missing from provider response",
            )
        if rate <= 0:
            raise ExchangeRateFetchError(
                pair.from_currency,
                pair.to_currency,
                f"provider returned non-positive rate {rate}",
            )
        logger.info("Fetched rate %s: %s", pair, rate)
        return rate

    async def _store(self, pair: CurrencyPair, rate: Decimal) -> None:
        entry = ExchangeRate(pair=pair, rate=rate, last_updated=self._clock())
        try:
            async with self._repository_scope() as repository:
                await repository.upsert(entry)
        except Exception as e:
            # The live rate is still good; it is re-persisted on the next miss
            logger.error("Failed to save rate %s: %s", pair, e)
        self._remember(pair, rate)
