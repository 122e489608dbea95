"""Async database engine and unit-of-work scopes."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from budgetbuddy.application.ports import ExchangeRateRepositoryScope
from budgetbuddy.domain.currency.repositories import ExchangeRateRepository
from budgetbuddy.infrastructure.persistence.sqlalchemy.repositories import (
    ExchangeRateRepositorySQLAlchemy,
)
from budgetbuddy_config.settings import get_settings


def create_engine(
    database_url: Optional[str] = None,
    echo: Optional[bool] = None,
) -> AsyncEngine:
    """Create an async engine, defaulting to the configured database."""
    settings = get_settings()
    database_url = database_url or settings.database_url
    _ensure_sqlite_directory(database_url)
    return create_async_engine(
        database_url,
        echo=settings.database_echo if echo is None else echo,
        pool_pre_ping=True,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def exchange_rate_repository_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> ExchangeRateRepositoryScope:
    """
    Build a factory of short-lived repository scopes.

    Each scope owns one session. It commits when the block exits cleanly and
    rolls back when it raises.

    Parameters
    ----------
    session_maker
        Session factory bound to the rate database

    Returns
    -------
    Callable opening an ``ExchangeRateRepository`` context
    """

    @asynccontextmanager
    async def _scope() -> AsyncGenerator[ExchangeRateRepository, None]:
        async with session_maker() as session:
            yield ExchangeRateRepositorySQLAlchemy(session)
            # Skipped when the block raises; closing the session rolls back
            await session.commit()

    return _scope


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
