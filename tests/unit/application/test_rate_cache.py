"""Unit tests for TieredRateCache."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

import pytest

from budgetbuddy.application.services import TieredRateCache
from budgetbuddy.domain.currency import (
    CurrencyPair,
    ExchangeRate,
    ExchangeRateFetchError,
    UnsupportedCurrencyError,
)
from budgetbuddy.domain.currency.repositories import ExchangeRateRepository

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
USD_EUR = CurrencyPair.of("USD", "EUR")

USD_QUOTES = {
    "USD": Decimal(1),
    "EUR": Decimal("0.92"),
    "PHP": Decimal("58.10"),
    "GBP": Decimal("0.79"),
    "CAD": Decimal("1.37"),
    "CHF": Decimal("0.90"),
    "JPY": Decimal("156.9"),
    "AUD": Decimal("1.51"),
}


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class InMemoryRateRepository(ExchangeRateRepository):
    """Durable tier stand-in shared by every scope."""

    def __init__(self):
        self.rows: dict[CurrencyPair, ExchangeRate] = {}
        self.lookups = 0
        self.fail_writes = False
        self.write_gates: dict[CurrencyPair, asyncio.Event] = {}
        self.writes: list[ExchangeRate] = []

    async def find_by_pair(self, pair: CurrencyPair) -> Optional[ExchangeRate]:
        self.lookups += 1
        return self.rows.get(pair)

    async def upsert(self, rate: ExchangeRate) -> None:
        if self.fail_writes:
            msg = "database is locked"
            raise RuntimeError(msg)
        # A gate holds only the next write for its pair
        gate = self.write_gates.pop(rate.pair, None)
        if gate is not None:
            await gate.wait()
        self.rows[rate.pair] = rate
        self.writes.append(rate)

    def scope(self):
        @asynccontextmanager
        async def _scope():
            yield self

        return _scope


class FakeProvider:
    """Counts fetches per base; a base can be held open with ``hold``."""

    def __init__(self, quotes: Optional[dict[str, dict[str, Decimal]]] = None):
        self.quotes = quotes if quotes is not None else {"USD": dict(USD_QUOTES)}
        self.calls: list[str] = []
        self.failing: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.closed = False

    def hold(self, base: str) -> asyncio.Event:
        self.gates[base] = asyncio.Event()
        return self.gates[base]

    async def fetch_rates(self, base_currency: str) -> dict[str, Decimal]:
        self.calls.append(base_currency)
        gate = self.gates.get(base_currency)
        if gate is not None:
            await gate.wait()
        if base_currency in self.failing:
            raise ExchangeRateFetchError(base_currency, None, "HTTP 503")
        return self.quotes.get(base_currency, {})

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryRateRepository:
    return InMemoryRateRepository()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def cache(repository, provider, clock) -> TieredRateCache:
    return TieredRateCache(repository.scope(), provider, clock=clock)


def _stored(rate: str, age: timedelta, pair: CurrencyPair = USD_EUR) -> ExchangeRate:
    return ExchangeRate(pair=pair, rate=Decimal(rate), last_updated=T0 - age)


class TestRateLookup:
    """Tier order: memory, durable store, provider."""

    @pytest.mark.asyncio
    async def test_identity_pair_is_one(self, cache, provider, repository):
        assert await cache.rate("eur", "EUR") == Decimal(1)
        assert provider.calls == []
        assert repository.lookups == 0

    @pytest.mark.asyncio
    async def test_unsupported_code_raises(self, cache, provider):
        with pytest.raises(UnsupportedCurrencyError):
            await cache.rate("USD", "XXX")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_fresh_stored_rate_is_served(self, cache, provider, repository):
        repository.rows[USD_EUR] = _stored("0.91", timedelta(minutes=59))

        assert await cache.rate("USD", "EUR") == Decimal("0.91")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_stale_stored_rate_is_refetched(self, cache, provider, repository, clock):
        repository.rows[USD_EUR] = _stored("0.91", timedelta(minutes=61))

        assert await cache.rate("USD", "EUR") == Decimal("0.92")
        assert provider.calls == ["USD"]
        assert repository.rows[USD_EUR].rate == Decimal("0.92")
        assert repository.rows[USD_EUR].last_updated == clock.now

    @pytest.mark.asyncio
    async def test_missing_rate_is_fetched_and_stored(self, cache, provider, repository):
        assert await cache.rate("usd", "php") == Decimal("58.10")

        stored = repository.rows[CurrencyPair.of("USD", "PHP")]
        assert stored.rate == Decimal("58.10")
        assert provider.calls == ["USD"]

    @pytest.mark.asyncio
    async def test_memory_hit_skips_store(self, cache, repository):
        await cache.rate("USD", "EUR")
        lookups = repository.lookups

        await cache.rate("USD", "EUR")

        assert repository.lookups == lookups

    @pytest.mark.asyncio
    async def test_memory_ttl_counts_from_insertion(self, cache, provider, repository, clock):
        # Stored 59 minutes ago: the memory copy still lives a full hour
        repository.rows[USD_EUR] = _stored("0.91", timedelta(minutes=59))
        await cache.rate("USD", "EUR")

        clock.advance(minutes=30)
        assert await cache.rate("USD", "EUR") == Decimal("0.91")
        assert repository.lookups == 1
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_expired_memory_falls_through(self, cache, provider, clock):
        await cache.rate("USD", "EUR")
        provider.quotes["USD"]["EUR"] = Decimal("0.95")

        clock.advance(minutes=61)

        assert await cache.rate("USD", "EUR") == Decimal("0.95")
        assert provider.calls == ["USD", "USD"]

    @pytest.mark.asyncio
    async def test_custom_freshness_window(self, repository, provider, clock):
        cache = TieredRateCache(
            repository.scope(),
            provider,
            freshness_window=timedelta(minutes=5),
            clock=clock,
        )
        repository.rows[USD_EUR] = _stored("0.91", timedelta(minutes=10))

        assert await cache.rate("USD", "EUR") == Decimal("0.92")
        assert cache.freshness_window == timedelta(minutes=5)


class TestRateFailures:
    @pytest.mark.asyncio
    async def test_code_missing_from_provider(self, cache, provider):
        del provider.quotes["USD"]["EUR"]

        with pytest.raises(ExchangeRateFetchError, match="missing"):
            await cache.rate("USD", "EUR")

    @pytest.mark.asyncio
    async def test_non_positive_rate_rejected(self, cache, provider):
        provider.quotes["USD"]["EUR"] = Decimal(0)

        with pytest.raises(ExchangeRateFetchError, match="non-positive"):
            await cache.rate("USD", "EUR")

    @pytest.mark.asyncio
    async def test_provider_error_propagates_and_is_retried(self, cache, provider):
        provider.failing.add("USD")
        with pytest.raises(ExchangeRateFetchError):
            await cache.rate("USD", "EUR")

        provider.failing.clear()
        assert await cache.rate("USD", "EUR") == Decimal("0.92")
        assert provider.calls == ["USD", "USD"]

    @pytest.mark.asyncio
    async def test_store_failure_still_returns_rate(
        self,
        cache,
        repository,
        provider,
        caplog,
    ):
        repository.fail_writes = True

        with caplog.at_level(logging.ERROR):
            assert await cache.rate("USD", "EUR") == Decimal("0.92")

        assert "Failed to save rate USD->EUR" in caplog.text
        # Still remembered in memory
        assert await cache.rate("USD", "EUR") == Decimal("0.92")
        assert provider.calls == ["USD"]


class TestSingleFlight:
    """Concurrent misses for one pair share a single provider call."""

    @pytest.mark.asyncio
    async def test_concurrent_misses_fetch_once(self, cache, provider):
        gate = provider.hold("USD")

        waiters = [asyncio.create_task(cache.rate("USD", "EUR")) for _ in range(10)]
        await asyncio.sleep(0)
        gate.set()
        rates = await asyncio.gather(*waiters)

        assert provider.calls == ["USD"]
        assert set(rates) == {Decimal("0.92")}

    @pytest.mark.asyncio
    async def test_concurrent_failure_is_shared(self, cache, provider):
        gate = provider.hold("USD")
        provider.failing.add("USD")

        waiters = [asyncio.create_task(cache.rate("USD", "EUR")) for _ in range(3)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*waiters, return_exceptions=True)

        assert provider.calls == ["USD"]
        assert all(isinstance(r, ExchangeRateFetchError) for r in results)

    @pytest.mark.asyncio
    async def test_other_pairs_do_not_wait(self, repository, clock):
        provider = FakeProvider(
            {"USD": dict(USD_QUOTES), "EUR": {"USD": Decimal("1.08")}},
        )
        cache = TieredRateCache(repository.scope(), provider, clock=clock)
        gate = provider.hold("USD")

        blocked = asyncio.create_task(cache.rate("USD", "EUR"))
        await asyncio.sleep(0)

        assert await asyncio.wait_for(cache.rate("EUR", "USD"), 1) == Decimal("1.08")
        assert not blocked.done()

        gate.set()
        assert await blocked == Decimal("0.92")

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_load(self, cache, provider):
        gate = provider.hold("USD")

        first = asyncio.create_task(cache.rate("USD", "EUR"))
        second = asyncio.create_task(cache.rate("USD", "EUR"))
        await asyncio.sleep(0)
        first.cancel()
        gate.set()

        assert await second == Decimal("0.92")
        assert provider.calls == ["USD"]


class TestRefreshCoordination:
    """Bulk refresh shares provider calls and never overlaps a pair's store."""

    @pytest.mark.asyncio
    async def test_same_base_misses_share_one_call(self, cache, provider):
        gate = provider.hold("USD")

        eur = asyncio.create_task(cache.rate("USD", "EUR"))
        gbp = asyncio.create_task(cache.rate("USD", "GBP"))
        await _settle()
        gate.set()

        assert await eur == Decimal("0.92")
        assert await gbp == Decimal("0.79")
        assert provider.calls == ["USD"]

    @pytest.mark.asyncio
    async def test_refresh_joins_running_lookup_fetch(self, cache, provider):
        gate = provider.hold("USD")

        lookup = asyncio.create_task(cache.rate("USD", "EUR"))
        refresh = asyncio.create_task(cache.refresh_all())
        await _settle()
        gate.set()

        assert await lookup == Decimal("0.92")
        assert await refresh == 7
        assert provider.calls.count("USD") == 1

    @pytest.mark.asyncio
    async def test_refresh_stores_after_running_lookup(
        self,
        cache,
        provider,
        repository,
    ):
        gate = asyncio.Event()
        repository.write_gates[USD_EUR] = gate

        lookup = asyncio.create_task(cache.rate("USD", "EUR"))
        await _settle()
        provider.quotes["USD"]["EUR"] = Decimal("0.99")
        refresh = asyncio.create_task(cache.refresh_all())
        await _settle()
        assert not lookup.done()
        gate.set()

        assert await lookup == Decimal("0.92")
        await refresh

        usd_eur_writes = [w.rate for w in repository.writes if w.pair == USD_EUR]
        assert usd_eur_writes == [Decimal("0.92"), Decimal("0.99")]
        assert repository.rows[USD_EUR].rate == Decimal("0.99")
        assert await cache.rate("USD", "EUR") == Decimal("0.99")


class TestRefreshAndLifecycle:
    @pytest.mark.asyncio
    async def test_refresh_all_fetches_each_base_once(self, repository, clock):
        bases = ("PHP", "EUR", "USD", "GBP", "CAD", "CHF", "JPY", "AUD")
        quotes = {
            base: {code: Decimal("1.5") for code in bases if code != base}
            for base in bases
        }
        provider = FakeProvider(quotes)
        cache = TieredRateCache(repository.scope(), provider, clock=clock)

        assert await cache.refresh_all() == 56
        assert sorted(provider.calls) == sorted(bases)
        assert len(repository.rows) == 56

    @pytest.mark.asyncio
    async def test_refresh_all_skips_failures(self, repository, provider, clock, caplog):
        # Only USD quotes exist: the 49 pairs from other bases fail
        with caplog.at_level(logging.ERROR):
            assert await cache_refresh(repository, provider, clock) == 7

        assert "Failed to update EUR->USD" in caplog.text

    @pytest.mark.asyncio
    async def test_refresh_all_updates_memory(self, cache, provider):
        await cache.rate("USD", "EUR")
        provider.quotes["USD"]["EUR"] = Decimal("0.99")

        await cache.refresh_all()

        assert await cache.rate("USD", "EUR") == Decimal("0.99")

    @pytest.mark.asyncio
    async def test_invalidate_one_pair(self, cache, provider):
        await cache.rate("USD", "EUR")
        await cache.rate("USD", "GBP")

        cache.invalidate(USD_EUR)
        provider.quotes["USD"]["EUR"] = Decimal("0.99")
        provider.quotes["USD"]["GBP"] = Decimal("0.50")

        # Durable entry is still fresh, memory for GBP untouched
        assert await cache.rate("USD", "EUR") == Decimal("0.92")
        assert await cache.rate("USD", "GBP") == Decimal("0.79")

    @pytest.mark.asyncio
    async def test_invalidate_all(self, cache, repository):
        await cache.rate("USD", "EUR")
        lookups = repository.lookups

        cache.invalidate()
        await cache.rate("USD", "EUR")

        assert repository.lookups == lookups + 1

    @pytest.mark.asyncio
    async def test_aclose_closes_provider(self, cache, provider):
        await cache.aclose()

        assert provider.closed


async def cache_refresh(repository, provider, clock) -> int:
    cache = TieredRateCache(repository.scope(), provider, clock=clock)
    return await cache.refresh_all()


async def _settle(rounds: int = 200) -> None:
    """Let every runnable task advance until it blocks."""
    for _ in range(rounds):
        await asyncio.sleep(0)
